"""
Notes Web — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches storage gets its own SQLite file under
       pytest's tmp_path, opened through aiosqlite, with the schema created.

Fixture Hierarchy (all function-scoped):
    ├── database_url:  sqlite+aiosqlite URL inside tmp_path
    ├── store:         opened NoteStore with the schema created
    ├── ada / note_n1: the a1/Ada + n1/T/C scenario entities
    ├── app:           create_app() wired to `store`
    └── test_client:   HTTPX AsyncClient talking to `app` over ASGI
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_notes.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notesweb.config import Settings
from notesweb.schemas.note import Author, Note
from notesweb.services.note_store import NoteStore


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}"


@pytest_asyncio.fixture
async def store(database_url):
    """
    Provides an open NoteStore on a fresh SQLite file.

    Closed on teardown unless the test already closed it.
    """
    note_store = NoteStore(database_url)
    await note_store.open()
    await note_store.create_schema()
    yield note_store
    if note_store.is_open:
        await note_store.close()


@pytest.fixture
def ada():
    return Author(id="a1", name="Ada")


@pytest.fixture
def note_n1(ada):
    return Note(id="n1", title="T", content="C", author=ada)


@pytest.fixture
def app(store, database_url):
    """
    Provides an app serving from `store`.

    ASGITransport does not run the lifespan, so the already-open store is
    handed to the factory directly.
    """
    from notesweb.main import create_app

    app_settings = Settings(database_url=database_url, log_level="WARNING")
    return create_app(
        app_settings=app_settings,
        store=store,
        id_factory=lambda: "generated-id",
    )


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/healthz")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
