"""Unit tests for engine creation and the engine registry.
"""
import config
import pytest
from sqlalchemy.pool import NullPool
from sqldao.connection import create_engine, create_url_from_options
from sqldao.connection import dispose_all_engines, get_engine_for_options
from sqldao.options import DaoOptions


class StubEngine:

    def __init__(self, url, **kwargs):
        self.url = url
        self.kwargs = kwargs
        self.disposed = False

    def dispose(self):
        self.disposed = True


@pytest.fixture(autouse=True)
def empty_registry():
    dispose_all_engines()
    yield
    dispose_all_engines()


def test_url_from_options():
    url = create_url_from_options(DaoOptions(drivername='sqlite', database='hr.db'))
    assert url.drivername == 'sqlite'
    assert url.database == 'hr.db'


def test_engine_without_pool():
    options = DaoOptions(drivername='sqlite', database='hr.db')
    engine = get_engine_for_options(options, engine_factory=StubEngine)

    assert engine.kwargs['poolclass'] is NullPool
    assert 'detect_types' in engine.kwargs['connect_args']
    assert 'pool_size' not in engine.kwargs


def test_engine_with_pool():
    options = DaoOptions(drivername='sqlite', database='pooled.db', use_pool=True,
                         pool_max_connections=3, pool_max_idle_time=120, pool_wait_timeout=10)
    engine = get_engine_for_options(options, engine_factory=StubEngine)

    assert 'poolclass' not in engine.kwargs
    assert engine.kwargs['pool_size'] == 3
    assert engine.kwargs['pool_recycle'] == 120
    assert engine.kwargs['pool_timeout'] == 10
    assert engine.kwargs['pool_pre_ping'] is True


def test_registry_reuses_engine():
    options = DaoOptions(drivername='sqlite', database='hr.db')
    first = get_engine_for_options(options, engine_factory=StubEngine)
    second = get_engine_for_options(DaoOptions(drivername='sqlite', database='hr.db'),
                                    engine_factory=StubEngine)
    other = get_engine_for_options(DaoOptions(drivername='sqlite', database='other.db'),
                                   engine_factory=StubEngine)

    assert first is second
    assert other is not first


def test_dispose_all_engines():
    engine = get_engine_for_options(DaoOptions(drivername='sqlite', database='hr.db'),
                                    engine_factory=StubEngine)
    dispose_all_engines()

    assert engine.disposed
    assert get_engine_for_options(DaoOptions(drivername='sqlite', database='hr.db'),
                                  engine_factory=StubEngine) is not engine


def test_create_engine_from_dict(tmp_path):
    engine = create_engine({'drivername': 'sqlite', 'database': str(tmp_path / 'hr.db')})
    assert engine.dialect.name == 'sqlite'
    assert isinstance(engine.pool, NullPool)


def test_create_engine_from_config_setting():
    engine = create_engine('sqlite', config=config)
    assert engine.dialect.name == 'sqlite'
    assert engine.url.database == 'sqldao.db'


if __name__ == '__main__':
    __import__('pytest').main([__file__])
