"""Engines and sessions for the insight log, cached per database URL."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_config

_engines: Dict[str, Engine] = {}
_factories: Dict[str, sessionmaker] = {}


def _resolve(database_url: Optional[str]) -> str:
    return database_url or get_config().database_url


def get_engine(database_url: Optional[str] = None) -> Engine:
    url = _resolve(database_url)
    engine = _engines.get(url)
    if engine is None:
        # Streamlit serves each browser session from its own thread
        connect_args = {"check_same_thread": False} if url.startswith("sqlite:") else {}
        engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        _engines[url] = engine
    return engine


def get_session(database_url: Optional[str] = None) -> Session:
    url = _resolve(database_url)
    factory = _factories.get(url)
    if factory is None:
        factory = sessionmaker(bind=get_engine(url), autoflush=False, expire_on_commit=False)
        _factories[url] = factory
    return factory()


@contextmanager
def session_scope(database_url: Optional[str] = None) -> Iterator[Session]:
    """Yield a session that commits on success and always closes.

    Errors roll the transaction back and are re-raised for the caller.
    """
    session = get_session(database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines() -> None:
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
    _factories.clear()
