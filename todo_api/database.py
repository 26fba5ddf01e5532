# todo_api/database.py

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from todo_api.errors import StorageError

logger = logging.getLogger("todo_api.database")

Base = declarative_base()


def _is_sqlite_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


class Database:
    """
    Storage context for the whole process.

    Built explicitly and handed to whoever needs it. `open()` creates the
    engine and the schema; calling it again while open returns the same
    instance. `close()` disposes the engine so a later `open()` starts fresh.
    """

    def __init__(self, url: str, *, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> "Database":
        if self.engine is not None:
            return self

        # For SQLite we must add connect_args
        connect_args = {}
        kwargs = {}
        if self.url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
            if _is_sqlite_memory(self.url):
                # one shared connection, otherwise every session sees an empty DB
                kwargs["poolclass"] = StaticPool

        self.engine = create_engine(
            self.url,
            connect_args=connect_args,
            echo=self.echo,
            **kwargs,
        )
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

        # models must be registered in metadata before create_all
        from todo_api.models.task import Task  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("database_opened", extra={"url": self.engine.url.render_as_string(hide_password=True)})
        return self

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("database_closed")

    def session(self) -> Session:
        if self._session_factory is None:
            raise StorageError("Database not initialized. Call open() first.")
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        One unit of work: commit on success, roll back on any engine error.
        Engine errors leave as StorageError.
        """
        db = self.session()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("storage_failure", extra={"error_type": type(exc).__name__}, exc_info=True)
            raise StorageError("Storage operation failed") from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
