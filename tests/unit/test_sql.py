"""Unit tests for textual SQL processing.

Tests the public API:
- has_placeholders(sql) / named_placeholders(sql) - Placeholder discovery
- standardize_placeholders(sql, style) - Convert ? to the driver paramstyle
- escape_colons_in_literals(sql) - Keep quoted colons out of text() binds
- build_paging_sql / build_count_sql - Subquery wrapping for paging
- create_where_in / create_number_where_in - IN lists
- sql_like_* - LIKE patterns
"""
import pytest
from sqldao.criteria import Criteria
from sqldao.exceptions import QueryError
from sqldao.params import IndexParameter, NameParameter
from sqldao.sql import TokenType, build_count_sql, build_paging_sql
from sqldao.sql import create_number_where_in, create_where_in, escape_colons_in_literals
from sqldao.sql import has_placeholders, named_placeholders, order_by_clause
from sqldao.sql import sql_like_contain, sql_like_end, sql_like_start
from sqldao.sql import standardize_placeholders, tokenize_sql, wrap_query


class TestPlaceholders:

    def test_tokenize_keeps_all_text(self):
        sql = "SELECT * FROM T WHERE A = ? AND B = :P_B AND C = 'x?'"
        tokens = tokenize_sql(sql)
        assert ''.join(t.text for t in tokens) == sql
        assert [t.type for t in tokens if t.type is not TokenType.SQL_TEXT] == [
            TokenType.POSITIONAL_PH, TokenType.NAMED_PH, TokenType.STRING_LITERAL]

    @pytest.mark.parametrize(('sql', 'expected'), [
        ('SELECT * FROM T WHERE A = ?', True),
        ('SELECT * FROM T WHERE A = :P_A', True),
        ("SELECT * FROM T WHERE A = '?'", False),
        ("SELECT * FROM T WHERE A = ':P_A'", False),
        ('SELECT A::text FROM T', False),
        ("SELECT * FROM T WHERE TS = '10:30'", False),
        ('', False),
        (None, False),
    ])
    def test_has_placeholders(self, sql, expected):
        assert has_placeholders(sql) is expected

    def test_named_placeholders_unique_in_order(self):
        sql = "SELECT * FROM T WHERE B = :P_B AND A = :P_A OR B = :P_B AND C = ':P_C' AND D::int = 1"
        assert named_placeholders(sql) == ['P_B', 'P_A']


class TestStandardizePlaceholders:

    def test_qmark_untouched(self):
        sql = "SELECT * FROM T WHERE A = ? AND B LIKE 'x%'"
        assert standardize_placeholders(sql, 'qmark') == sql

    def test_format_doubles_percent(self):
        sql = "SELECT * FROM T WHERE A = ? AND B LIKE 'x%' AND C = '?'"
        assert standardize_placeholders(sql, 'format') == \
            "SELECT * FROM T WHERE A = %s AND B LIKE 'x%%' AND C = '?'"

    def test_numeric_counts_positions(self):
        sql = "SELECT * FROM T WHERE A = ? AND B = ? AND C = '?'"
        assert standardize_placeholders(sql, 'numeric') == \
            "SELECT * FROM T WHERE A = :1 AND B = :2 AND C = '?'"

    def test_unsupported_style(self):
        with pytest.raises(QueryError):
            standardize_placeholders('SELECT ?', 'pyformat')


class TestPagingSql:

    def test_wrap_strips_terminator(self):
        assert wrap_query('SELECT * FROM EMPLOYEE ;\n') == 'SELECT * FROM (SELECT * FROM EMPLOYEE) TB'

    def test_empty_body_rejected(self):
        with pytest.raises(QueryError):
            wrap_query(' ; ')

    def test_order_by_first_column_by_default(self):
        sql = build_paging_sql('SELECT * FROM EMPLOYEE', Criteria(page=1, size=10))
        assert sql == 'SELECT * FROM (SELECT * FROM EMPLOYEE) TB ORDER BY 1'

    def test_order_by_column(self):
        criteria = Criteria(page=1, size=10, order_by_column='NAME')
        assert order_by_clause(criteria) == ' ORDER BY NAME'

    def test_sorts_win_over_order_by_column(self):
        criteria = Criteria(order_by_column='NAME').add_sort('DEPT', 'desc').add_sort('EMP_NO')
        assert order_by_clause(criteria) == ' ORDER BY DEPT DESC, EMP_NO ASC'

    def test_sorts_validated_when_set_directly(self):
        criteria = Criteria(sorts={'NAME': 'sideways'})
        with pytest.raises(QueryError):
            order_by_clause(criteria)

    def test_count_sql(self):
        assert build_count_sql('SELECT * FROM EMPLOYEE WHERE DEPT = ?;') == \
            'SELECT COUNT(*) AS TOTAL FROM (SELECT * FROM EMPLOYEE WHERE DEPT = ?) TB'


class TestWhereIn:

    def test_named(self):
        params = NameParameter()
        assert create_where_in([5, 7, 9], params) == ':P_IN_PARAM_1, :P_IN_PARAM_2, :P_IN_PARAM_3'
        assert params.to_map_parameter() == {'P_IN_PARAM_1': 5, 'P_IN_PARAM_2': 7, 'P_IN_PARAM_3': 9}

    def test_named_prefix(self):
        params = NameParameter()
        assert create_where_in(('A', 'B'), params, 'DEPT') == ':P_DEPT_PARAM_1, :P_DEPT_PARAM_2'

    @pytest.mark.parametrize('prefix', ['', None])
    def test_blank_prefix(self, prefix):
        params = NameParameter()
        assert create_where_in(['A'], params, prefix) == ':P_X_PARAM_1'

    def test_positional(self):
        params = IndexParameter('first')
        assert create_where_in([5, 7, 9], params) == '?, ?, ?'
        assert params.to_array_parameter() == ['first', 5, 7, 9]

    def test_scalar_is_one_item(self):
        params = IndexParameter()
        assert create_where_in('abc', params) == '?'
        assert params.to_array_parameter() == ['abc']

    @pytest.mark.parametrize('items', [[], (), None])
    def test_empty(self, items):
        params = NameParameter()
        assert create_where_in(items, params) == ''
        assert len(params) == 0

    def test_number_where_in(self):
        assert create_number_where_in(1, None, 2.5, 3) == '1,2.5,3'
        assert create_number_where_in() == ''

    @pytest.mark.parametrize('item', ['1', True])
    def test_number_where_in_rejects_non_numbers(self, item):
        with pytest.raises(QueryError):
            create_number_where_in(1, item)


class TestEscapeColonsInLiterals:

    def test_quoted_colons_escaped(self):
        sql = "SELECT * FROM T WHERE ID = :P_ID AND NOTE = 'time :P_X' AND AT = '12:30'"
        assert escape_colons_in_literals(sql) == (
            "SELECT * FROM T WHERE ID = :P_ID AND NOTE = 'time \\:P_X' AND AT = '12\\:30'")

    def test_quoted_identifiers_escaped_casts_kept(self):
        sql = 'SELECT :P_A::int, "col:name" FROM T'
        assert escape_colons_in_literals(sql) == 'SELECT :P_A::int, "col\\:name" FROM T'

    @pytest.mark.parametrize('sql', ['', 'SELECT 1', "SELECT 'no colon'"])
    def test_nothing_to_escape(self, sql):
        assert escape_colons_in_literals(sql) == sql


def test_like_patterns():
    assert sql_like_contain('computer') == '%computer%'
    assert sql_like_start('computer') == 'computer%'
    assert sql_like_end('computer') == '%computer'
    assert sql_like_contain(None) is None


if __name__ == '__main__':
    __import__('pytest').main([__file__])
