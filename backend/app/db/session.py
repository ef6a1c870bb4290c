import importlib.util
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings, settings as default_settings
from app.core.errors import StoreFailure

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Point plain postgres URLs at the psycopg (v3) driver when psycopg2 is absent.

    SQLAlchemy picks psycopg2 for 'postgresql://'. Only 'psycopg[binary]' is a
    dependency, so the driver is injected into the URL instead.
    """
    if not url.startswith(("postgres://", "postgresql://")) or "+psycopg" in url:
        return url
    if importlib.util.find_spec("psycopg2") is not None:
        return url
    # Normalize legacy prefix 'postgres://' -> 'postgresql://'
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url.replace("postgresql://", "postgresql+psycopg://", 1)


def _enable_sqlite_foreign_keys(dbapi_connection, _record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Store:
    """Handle on the relational store: one engine plus its session factory.

    The store is opened and closed explicitly; the web app does it in its
    lifespan and tests do it per fixture. Nothing here is process-global.
    """

    def __init__(self, database_url: str, sqlite_busy_timeout: float = 30.0):
        self.database_url = normalize_database_url(database_url)
        self.sqlite_busy_timeout = sqlite_busy_timeout
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @classmethod
    def from_settings(cls, cfg: Settings = default_settings) -> "Store":
        return cls(cfg.database_url, sqlite_busy_timeout=cfg.sqlite_busy_timeout)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Store is not open")
        return self._engine

    def open(self) -> "Store":
        if self._engine is not None:
            return self
        connect_args = {}
        if self.is_sqlite:
            # Request handlers run in a threadpool; writers wait on the lock instead of failing
            connect_args = {"check_same_thread": False, "timeout": self.sqlite_busy_timeout}
        engine = create_engine(self.database_url, connect_args=connect_args)
        if self.is_sqlite:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
        logger.info("Store opened (%s)", engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        logger.info("Store closed")
        self._engine = None
        self._session_factory = None

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Store is not open")
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        db = self.session()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))


@contextmanager
def store_guard(db: Session, message: str) -> Iterator[None]:
    """Roll back and surface driver/ORM errors as a retryable StoreFailure."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(message)
        raise StoreFailure(message) from exc
