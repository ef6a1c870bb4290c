import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.init_db import create_tables
from app.db.session import Store
from app.main import create_app


@pytest.fixture
def database_url(tmp_path):
    # File-backed so several threads can hold their own connections
    return f"sqlite:///{tmp_path / 'tickets.db'}"


@pytest.fixture
def store(database_url):
    s = Store(database_url, sqlite_busy_timeout=30).open()
    create_tables(s)
    yield s
    s.close()


@pytest.fixture
def db(store):
    with store.session_scope() as session:
        yield session


@pytest.fixture
def client(store, database_url):
    cfg = Settings(DATABASE_URL=database_url, ENV="test")
    app = create_app(cfg, store=store)
    with TestClient(app) as c:
        yield c
