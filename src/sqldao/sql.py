"""
Textual SQL processing.

Statements are written with `?` for positional values and `:NAME` for
named values. This module tokenizes SQL just enough to leave string
literals alone while it:

- converts `?` to the driver's own positional marker (`standardize_placeholders`)
- lists the `:NAME` placeholders a statement references (`named_placeholders`)
- wraps a SELECT body for paging and counting (`build_paging_sql`, `build_count_sql`)
- emits WHERE-IN placeholder lists bound into a parameter (`create_where_in`)

No SQL is parsed beyond that; callers supply valid single-statement bodies.
"""
import re
from dataclasses import dataclass
from enum import Enum, auto
from numbers import Number
from typing import TYPE_CHECKING, Any

from libb import isiterable

from sqldao.criteria import sort_direction
from sqldao.exceptions import QueryError
from sqldao.params import ParameterKind

if TYPE_CHECKING:
    from sqldao.criteria import Criteria
    from sqldao.params import Parameter

__all__ = [
    'tokenize_sql',
    'has_placeholders',
    'named_placeholders',
    'standardize_placeholders',
    'escape_colons_in_literals',
    'wrap_query',
    'order_by_clause',
    'build_paging_sql',
    'build_count_sql',
    'create_where_in',
    'create_number_where_in',
    'sql_like_contain',
    'sql_like_start',
    'sql_like_end',
]


class TokenType(Enum):
    """Token types identified during SQL scanning."""
    SQL_TEXT = auto()
    STRING_LITERAL = auto()
    POSITIONAL_PH = auto()      # ?
    NAMED_PH = auto()           # :NAME


@dataclass(slots=True)
class Token:
    """Token from SQL scanning."""
    type: TokenType
    text: str
    start: int
    end: int


# A colon preceded by a word character or another colon is a cast or a
# time literal fragment, never a placeholder.
_TOKENIZE = re.compile(r"""
    (?P<string>'(?:[^']|'')*'|"(?:[^"]|"")*")
    |(?P<named>(?<![:\w]):(?P<pname>[A-Za-z_]\w*))
    |(?P<qmark>\?)
""", re.VERBOSE)

_HAS_PLACEHOLDER = re.compile(r'\?|(?<![:\w]):[A-Za-z_]\w*')

_TRAILING_TERMINATOR = re.compile(r'[\s;]+$')


def tokenize_sql(sql: str) -> list[Token]:
    """Split SQL into tokens in a single pass.

    Parameters
        sql: SQL query string

    Returns
        List of tokens preserving all SQL text
    """
    tokens = []
    last_end = 0

    for match in _TOKENIZE.finditer(sql):
        start, end = match.span()

        if start > last_end:
            tokens.append(Token(TokenType.SQL_TEXT, sql[last_end:start], last_end, start))

        if match.group('string'):
            ttype = TokenType.STRING_LITERAL
        elif match.group('named'):
            ttype = TokenType.NAMED_PH
        else:
            ttype = TokenType.POSITIONAL_PH

        tokens.append(Token(ttype, match.group(0), start, end))
        last_end = end

    if last_end < len(sql):
        tokens.append(Token(TokenType.SQL_TEXT, sql[last_end:], last_end, len(sql)))

    return tokens


def has_placeholders(sql: str | None) -> bool:
    """Check if SQL has any parameter placeholders outside string literals.
    """
    if not sql or not _HAS_PLACEHOLDER.search(sql):
        return False
    return any(t.type in {TokenType.POSITIONAL_PH, TokenType.NAMED_PH}
               for t in tokenize_sql(sql))


def named_placeholders(sql: str) -> list[str]:
    """Names of the `:NAME` placeholders in order of first appearance.
    """
    names = []
    for token in tokenize_sql(sql):
        if token.type == TokenType.NAMED_PH:
            name = token.text[1:]
            if name not in names:
                names.append(name)
    return names


def standardize_placeholders(sql: str, style: str = 'qmark') -> str:
    """Convert `?` markers to a DB-API paramstyle.

    Parameters
        sql: SQL query string using `?` markers
        style: Target paramstyle: 'qmark' (?), 'format' (%s) or 'numeric' (:1)

    Returns
        SQL with converted markers. For 'format', literal percent signs are
        doubled so the driver does not read them as markers.
    """
    if not sql or style == 'qmark':
        return sql

    if style not in {'format', 'numeric'}:
        raise QueryError(f'Unsupported paramstyle: {style}')

    result = []
    position = 0
    for token in tokenize_sql(sql):
        if token.type == TokenType.POSITIONAL_PH:
            position += 1
            result.append('%s' if style == 'format' else f':{position}')
        elif style == 'format':
            result.append(token.text.replace('%', '%%'))
        else:
            result.append(token.text)
    return ''.join(result)


def escape_colons_in_literals(sql: str) -> str:
    """Escape colons in string literals for SQLAlchemy `text()`.

    `text()` reads every `:word` as a bind parameter, quoted or not. A
    backslash-escaped colon is emitted as a plain colon.

    Parameters
        sql: SQL query string using `:NAME` markers

    Returns
        SQL with `\\:` in place of each colon inside a string literal
    """
    if not sql or ':' not in sql:
        return sql

    result = []
    for token in tokenize_sql(sql):
        if token.type == TokenType.STRING_LITERAL:
            result.append(token.text.replace(':', '\\:'))
        else:
            result.append(token.text)
    return ''.join(result)


def _body(sql: str) -> str:
    body = _TRAILING_TERMINATOR.sub('', sql.strip())
    if not body:
        raise QueryError('SQL body is empty')
    return body


def wrap_query(sql: str) -> str:
    return f'SELECT * FROM ({_body(sql)}) TB'


def order_by_clause(criteria: 'Criteria') -> str:
    """ORDER BY for a paged query.

    Sorts win over the single order-by column; with neither the first
    output column is used so the row window stays deterministic.
    """
    if not criteria.is_empty_sort:
        terms = [f'{column} {sort_direction(column, direction)}'
                 for column, direction in criteria.sorts.items()]
        return ' ORDER BY ' + ', '.join(terms)
    if criteria.order_by_column:
        return f' ORDER BY {criteria.order_by_column}'
    return ' ORDER BY 1'


def build_paging_sql(sql: str, criteria: 'Criteria') -> str:
    """Wrap a SELECT body as a subquery and order it."""
    return wrap_query(sql) + order_by_clause(criteria)


def build_count_sql(sql: str) -> str:
    return f'SELECT COUNT(*) AS TOTAL FROM ({_body(sql)}) TB'


def create_where_in(items: Any, params: 'Parameter', prefix: str | None = 'IN') -> str:
    """Emit the placeholder list for `col IN (...)` and bind the items.

    Positional parameters get `?, ?, ?`. Named parameters get
    `:P_<prefix>_PARAM_1, :P_<prefix>_PARAM_2, ...`; a blank prefix becomes
    `X`. Empty input produces an empty string and binds nothing.
    """
    if not items:
        return ''
    if isinstance(items, str) or not isiterable(items):
        items = [items]

    if params.kind is ParameterKind.INDEXED:
        markers = []
        for item in items:
            markers.append('?')
            params.add(item)
        return ', '.join(markers)

    prefix = prefix or 'X'
    markers = []
    for inx, item in enumerate(items, 1):
        name = f'P_{prefix}_PARAM_{inx}'
        markers.append(f':{name}')
        params.add(name, item)
    return ', '.join(markers)


def create_number_where_in(*items: Number | None) -> str:
    """Inline numbers as a literal `IN` list, skipping None.
    """
    values = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, bool) or not isinstance(item, Number):
            raise QueryError(f'Not a number: {item!r}')
        values.append(str(item))
    return ','.join(values)


def sql_like_contain(value: str | None) -> str | None:
    """'computer' -> '%computer%'"""
    if value is None:
        return None
    return f'%{value}%'


def sql_like_start(value: str | None) -> str | None:
    """'computer' -> 'computer%'"""
    if value is None:
        return None
    return f'{value}%'


def sql_like_end(value: str | None) -> str | None:
    """'computer' -> '%computer'"""
    if value is None:
        return None
    return f'%{value}'
