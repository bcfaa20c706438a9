"""
Mock driver objects for sqldao unit tests.

Provides stand-ins for the pieces of a DB-API driver and a SQLAlchemy
result that the mapper and dialect detection touch, so mapping can be
tested without a database.

Usage:
    def test_mapping(make_result):
        result = make_result(['EMP_NO', 'NAME'], [(1, 'Alice')])
        BeanMapper(Employee).map_result(result)
"""
import pytest


class FakeLob:
    """Large object handle: the whole value is returned by `read()`."""

    def __init__(self, data):
        self.data = data
        self.reads = 0

    def read(self):
        self.reads += 1
        return self.data


class FakeCursor:
    def __init__(self, description):
        self.description = description


class FakeResult:
    """Iterable result exposing a DB-API cursor description."""

    def __init__(self, names, rows, type_codes=None):
        type_codes = type_codes or [None] * len(names)
        self.cursor = FakeCursor([(name, code, None, None, None, None, None)
                                  for name, code in zip(names, type_codes)])
        self._names = list(names)
        self._rows = list(rows)

    def keys(self):
        return self._names

    def __iter__(self):
        return iter(self._rows)


def _create_simple_mock_connection(connection_type='postgresql'):
    """
    Create a simple mock DB-API connection whose class module names a driver.

    Args:
        connection_type: Database type ('postgresql', 'sqlite', 'mssql', 'oracle', 'unknown')

    Returns
        Simple mock connection object that will pass type detection
    """
    modules = {
        'postgresql': 'psycopg',
        'sqlite': 'sqlite3',
        'mssql': 'pyodbc',
        'oracle': 'oracledb',
        'unknown': 'unknown_db',
    }

    class MockConn:
        pass

    MockConn.__module__ = modules[connection_type]
    MockConn.__qualname__ = 'Connection'
    MockConn.__name__ = 'Connection'
    return MockConn()


@pytest.fixture
def create_simple_mock_connection():
    """
    Fixture that provides a factory function to create simple mock connections.

    Example usage:
        def test_connection_detection(create_simple_mock_connection):
            pg_conn = create_simple_mock_connection('postgresql')
    """
    def factory(connection_type='postgresql'):
        return _create_simple_mock_connection(connection_type)

    return factory


@pytest.fixture
def make_result():
    """Factory for FakeResult objects."""
    def factory(names, rows, type_codes=None):
        return FakeResult(names, rows, type_codes)

    return factory


@pytest.fixture
def make_lob():
    """Factory for FakeLob objects."""
    return FakeLob
