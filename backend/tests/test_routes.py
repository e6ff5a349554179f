"""
Notes Web — HTTP Endpoint Tests
================================

What:  Tests for GET /notes, GET /healthz, /static, and the middleware.
How:   HTTPX AsyncClient over ASGITransport against an app wired to a real
       temporary store (see conftest.py).

What we test:
    ✅ Listing and single-note pages render as HTML
    ✅ Unknown note id → 404 plain text; store failure → 500 plain text
    ✅ Constraint violation → 409; unexpected exception → 500, header still set
    ✅ Note content is HTML-escaped
    ✅ X-Request-Id is echoed or generated
    ✅ Only .css files are served from /static
    ✅ Lifespan closes the store when startup fails after open
"""

import logging
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notesweb.exceptions import ConstraintError, StorageError, StoreConnectionError
from notesweb.schemas.note import Author, Note


@pytest_asyncio.fixture
async def lenient_client(app):
    """Client that turns app exceptions into responses instead of raising them."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestNotesPage:

    @pytest.mark.asyncio
    async def test_listing_empty_store(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "No notes yet." in response.text

    @pytest.mark.asyncio
    async def test_listing_shows_every_note(self, test_client, store, ada, note_n1):
        await store.add_author(ada)
        await store.add_note(note_n1)
        second = Note.create("Second title", "body", ada)
        await store.add_note(second)

        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert "/notes?note_id=n1" in response.text
        assert "Second title" in response.text
        assert response.text.count("Ada") >= 2

    @pytest.mark.asyncio
    async def test_single_note(self, test_client, store, ada, note_n1):
        await store.add_author(ada)
        await store.add_note(note_n1)

        response = await test_client.get("/notes", params={"note_id": "n1"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'id="note-n1"' in response.text
        assert "by Ada" in response.text

    @pytest.mark.asyncio
    async def test_empty_note_id_lists_notes(self, test_client, store, ada, note_n1):
        await store.add_author(ada)
        await store.add_note(note_n1)

        response = await test_client.get("/notes?note_id=")

        assert response.status_code == 200
        assert "All notes" in response.text

    @pytest.mark.asyncio
    async def test_content_is_escaped(self, test_client, store):
        author = Author.create("<b>Mallory</b>")
        note = Note.create("<script>x</script>", "a & b", author)
        await store.add_author(author)
        await store.add_note(note)

        response = await test_client.get("/notes", params={"note_id": note.id})

        assert "<script>x</script>" not in response.text
        assert "&lt;script&gt;" in response.text
        assert "a &amp; b" in response.text

    @pytest.mark.asyncio
    async def test_unknown_note_is_404(self, test_client):
        response = await test_client.get("/notes", params={"note_id": "missing"})

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "error: note with ID 'missing' was not found"

    @pytest.mark.asyncio
    async def test_storage_failure_is_500(self, app, test_client, store):
        store.get_notes = AsyncMock(side_effect=StorageError(message="Could not retrieve notes"))

        response = await test_client.get("/notes")

        assert response.status_code == 500
        assert response.text == "error: Could not retrieve notes"
        assert response.headers["X-Request-Id"] == "generated-id"

    @pytest.mark.asyncio
    async def test_constraint_error_is_409(self, test_client, store):
        store.get_note = AsyncMock(side_effect=ConstraintError(message="note n1 already exists"))

        response = await test_client.get(
            "/notes", params={"note_id": "n1"}, headers={"X-Request-Id": "req-409"}
        )

        assert response.status_code == 409
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "error: note n1 already exists"
        assert response.headers["X-Request-Id"] == "req-409"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500_with_request_id(self, lenient_client, store):
        store.get_notes = AsyncMock(side_effect=RuntimeError("boom"))

        response = await lenient_client.get("/notes", headers={"X-Request-Id": "rid-1"})

        assert response.status_code == 500
        assert response.text == "error: an unexpected error occurred"
        assert "boom" not in response.text
        assert response.headers["X-Request-Id"] == "rid-1"

    @pytest.mark.asyncio
    async def test_closed_store_is_500(self, test_client, store):
        await store.close()

        response = await test_client.get("/notes", params={"note_id": "n1"})

        assert response.status_code == 500
        assert response.text.startswith("error: ")


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/notes")
        assert response.headers["X-Request-Id"] == "generated-id"

    @pytest.mark.asyncio
    async def test_client_value_echoed(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-Id": "abc-123"})
        assert response.headers["X-Request-Id"] == "abc-123"

    @pytest.mark.asyncio
    async def test_set_on_error_responses(self, test_client):
        response = await test_client.get(
            "/notes", params={"note_id": "missing"}, headers={"X-Request-Id": "req-404"}
        )
        assert response.status_code == 404
        assert response.headers["X-Request-Id"] == "req-404"

    def test_default_factory_is_numeric(self):
        from notesweb.middleware.request_id import next_request_id

        first = next_request_id()
        assert first.isdigit()
        assert int(next_request_id()) >= int(first)


class TestHealthAndStatic:

    @pytest.mark.asyncio
    async def test_healthz(self, test_client):
        response = await test_client.get("/healthz")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_healthz_store_down(self, test_client, store):
        store.ping = AsyncMock(return_value=False)

        response = await test_client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["database"] == "disconnected"

    @pytest.mark.asyncio
    async def test_stylesheet_served(self, test_client):
        response = await test_client.get("/static/style.css")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/css")

    @pytest.mark.asyncio
    async def test_non_css_rejected(self, test_client):
        response = await test_client.get("/static/index.html")
        assert response.status_code == 404

        response = await test_client.get("/static/notes.js")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_stylesheet_404(self, test_client):
        response = await test_client.get("/static/missing.css")
        assert response.status_code == 404


class TestLifespan:

    @pytest.mark.asyncio
    async def test_lifespan_opens_and_closes_store(self, database_url):
        from notesweb.config import Settings
        from notesweb.main import create_app

        app = create_app(app_settings=Settings(database_url=database_url, log_level="WARNING"))
        store = app.state.store

        async with app.router.lifespan_context(app):
            assert store.is_open
            assert await store.get_notes() == []

        assert not store.is_open

    @pytest.mark.asyncio
    async def test_lifespan_fails_on_unopenable_store(self, tmp_path):
        from notesweb.config import Settings
        from notesweb.main import create_app

        url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'notes.db'}"
        app = create_app(app_settings=Settings(database_url=url, log_level="WARNING"))

        with pytest.raises(StoreConnectionError):
            async with app.router.lifespan_context(app):
                pass

    @pytest.mark.asyncio
    async def test_lifespan_closes_store_when_startup_fails(self, database_url):
        from notesweb.config import Settings
        from notesweb.main import create_app
        from notesweb.services.note_store import NoteStore

        store = NoteStore(database_url)
        store.create_schema = AsyncMock(side_effect=StorageError(message="Could not create tables"))
        app = create_app(
            app_settings=Settings(database_url=database_url, log_level="WARNING"),
            store=store,
        )

        with pytest.raises(StorageError):
            async with app.router.lifespan_context(app):
                pass

        assert not store.is_open


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_access_line_carries_request_fields(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="notesweb.access"):
            await test_client.get(
                "/notes", headers={"X-Request-Id": "log-me", "User-Agent": "pytest-agent"}
            )

        records = [r for r in caplog.records if r.name == "notesweb.access"]
        assert len(records) == 1
        record = records[0]
        assert record.request_id == "log-me"
        assert record.method == "GET"
        assert record.path == "/notes"
        assert record.status == 200
        assert record.user_agent == "pytest-agent"
        assert record.levelno == logging.INFO

    @pytest.mark.asyncio
    async def test_not_found_logged_as_warning(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="notesweb.access"):
            await test_client.get("/notes", params={"note_id": "missing"})

        records = [r for r in caplog.records if r.name == "notesweb.access"]
        assert records[0].levelno == logging.WARNING

    @pytest.mark.asyncio
    async def test_unhandled_error_still_logged(self, lenient_client, store, caplog):
        store.get_notes = AsyncMock(side_effect=RuntimeError("boom"))

        with caplog.at_level(logging.INFO, logger="notesweb.access"):
            await lenient_client.get("/notes", headers={"X-Request-Id": "rid-2"})

        records = [r for r in caplog.records if r.name == "notesweb.access"]
        assert len(records) == 1
        assert records[0].status == 500
        assert records[0].request_id == "rid-2"
        assert records[0].levelno == logging.ERROR

    @pytest.mark.asyncio
    async def test_health_probe_not_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="notesweb.access"):
            await test_client.get("/healthz")

        assert not [r for r in caplog.records if r.name == "notesweb.access"]
