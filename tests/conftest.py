"""Shared test fixtures."""

import pytest

from flashsprint.app import App
from flashsprint.db import init_db
from flashsprint.review_session import ReviewSession


@pytest.fixture
def tmp_data_dir(tmp_path, monkeypatch):
    """Temporary data directory, also exported as FLASHSPRINT_DIR."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setenv("FLASHSPRINT_DIR", str(data_dir))
    return data_dir


@pytest.fixture
def db_conn():
    """In-memory SQLite database with schema applied."""
    conn = init_db(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def app(tmp_data_dir):
    """App instance with tmp data_dir, in-memory DB and the ladder scheduler."""
    a = App(data_dir=tmp_data_dir)
    a.init_db(":memory:")
    a.load_scheduler("ladder")
    yield a
    a.close()


@pytest.fixture
def ladder(app):
    return ReviewSession(app)


@pytest.fixture
def rotation(tmp_data_dir):
    a = App(data_dir=tmp_data_dir)
    a.init_db(":memory:")
    a.load_scheduler("rotation")
    yield ReviewSession(a)
    a.close()
