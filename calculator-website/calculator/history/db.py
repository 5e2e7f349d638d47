"""History database engine and session management."""

from __future__ import annotations

from typing import Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base


# Engines are cached per URL
_engines: Dict[str, Engine] = {}


def get_engine(database_url: str) -> Engine:
    """Get or create the SQLAlchemy engine for ``database_url``.

    The ``calculator_kv`` table is created on first use.
    """
    engine = _engines.get(database_url)
    if engine is not None:
        return engine

    # Handle SQLite cross-thread issue
    connect_args = {}
    if database_url.startswith("sqlite:"):
        connect_args = {"check_same_thread": False}

    engine = create_engine(
        database_url,
        connect_args=connect_args,
        echo=False,
        pool_pre_ping=True,
    )
    Base.metadata.create_all(engine)
    _engines[database_url] = engine
    return engine


def get_session(database_url: str) -> Session:
    engine = get_engine(database_url)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    return SessionLocal()


def dispose_engines() -> None:
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
