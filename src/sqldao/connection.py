"""
Engine creation and management.

This module provides:
1. `create_engine()` for building a SQLAlchemy engine from `DaoOptions`
2. A thread-safe engine registry so equal options share one engine
3. `dispose_all_engines()`, registered to run at interpreter exit
"""
import atexit
import logging
import threading
from collections.abc import Callable
from dataclasses import fields
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

from libb import load_options
from sqldao.options import DaoOptions
from sqldao.strategy import get_strategy

__all__ = [
    'create_engine',
    'create_url_from_options',
    'get_engine_for_options',
    'dispose_all_engines',
]

logger = logging.getLogger(__name__)

_engine_registry: dict[str, Engine] = {}
_engine_registry_lock = threading.RLock()


def create_url_from_options(options: DaoOptions) -> sa.URL:
    """Convert DaoOptions to a SQLAlchemy URL for the options' dialect.
    """
    return get_strategy(options.drivername).build_connection_url(options)


def get_engine_for_options(options: DaoOptions,
                           engine_factory: Callable[..., Engine] = sa.create_engine,
                           **kwargs: Any) -> Engine:
    """Get or create a SQLAlchemy engine for the given options.

    Without `use_pool` every checkout opens a fresh DB-API connection
    (NullPool).
    """
    key = str(options)

    with _engine_registry_lock:
        if key in _engine_registry:
            logger.debug(f'Using existing engine for {options.drivername}')
            return _engine_registry[key]

        url = create_url_from_options(options)

        engine_kwargs: dict[str, Any] = {'echo': False}
        engine_kwargs.update(get_strategy(options.drivername).get_engine_kwargs(options))

        if not options.use_pool:
            engine_kwargs['poolclass'] = NullPool
        else:
            engine_kwargs['pool_size'] = options.pool_max_connections
            engine_kwargs['pool_recycle'] = options.pool_max_idle_time
            engine_kwargs['pool_timeout'] = options.pool_wait_timeout
            engine_kwargs['max_overflow'] = 10
            engine_kwargs['pool_pre_ping'] = True
            engine_kwargs['pool_reset_on_return'] = 'rollback'

        engine_kwargs.update(kwargs)

        engine = engine_factory(url, **engine_kwargs)

        _engine_registry[key] = engine
        logger.debug(f'Created new engine for {options.drivername}')

        return engine


def dispose_all_engines() -> None:
    """Dispose all engines in the registry.
    """
    with _engine_registry_lock:
        for engine in _engine_registry.values():
            engine.dispose()
        _engine_registry.clear()
        logger.debug('All database engines disposed')


atexit.register(dispose_all_engines)


@load_options(cls=DaoOptions)
def create_engine(options: DaoOptions | dict[str, Any] | str,
                  config: Any | None = None, **kw: Any) -> Engine:
    """Create (or reuse) the engine a DAO runs against.

    Args:
        options: Can be:
                - DaoOptions object
                - String path to configuration
                - Dictionary of options
                - Options specified as keyword arguments
        config: Configuration object (for loading from config files)
        **kw: Additional keyword arguments to override options

    Returns
        SQLAlchemy Engine
    """
    if isinstance(options, DaoOptions):
        for field in fields(options):
            kw.pop(field.name, None)
    else:
        options_func = load_options(cls=DaoOptions)(lambda o, c: o)
        options = options_func(options, config, **kw)

    return get_engine_for_options(options)
