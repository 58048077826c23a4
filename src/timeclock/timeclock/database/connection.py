from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


@dataclass
class DBConfig:
    url: str
    echo: bool = False


class DatabaseConnection:
    """Owns the SQLAlchemy engine for one local store.

    Note: The outermost transaction() call opens, commits or rolls back; nested
    calls on the same thread join it, so a service can group repository calls.
    An in-memory SQLite store has a single shared connection, so there the
    outermost transactions of different threads run one at a time.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._engine = self._create_engine(config)
        self._local = threading.local()
        self._shared_lock = threading.RLock() if isinstance(self._engine.pool, StaticPool) else None

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def is_sqlite(self) -> bool:
        return self._engine.dialect.name == "sqlite"

    @staticmethod
    def _create_engine(config: DBConfig) -> Engine:
        if not config.url.startswith("sqlite"):
            return create_engine(config.url, echo=config.echo, pool_pre_ping=True)

        kwargs = {"connect_args": {"check_same_thread": False}}
        if config.url in _MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(config.url, echo=config.echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, _record):
            # Let SQLAlchemy drive BEGIN so reads and writes share one transaction.
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN")

        return engine

    @property
    def in_transaction(self) -> bool:
        return getattr(self._local, "conn", None) is not None

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        active = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return

        with self._exclusive():
            with self._engine.begin() as conn:
                self._local.conn = conn
                try:
                    yield conn
                finally:
                    self._local.conn = None

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if self._shared_lock is None:
            yield
            return
        with self._shared_lock:
            yield

    def dispose(self) -> None:
        self._engine.dispose()
