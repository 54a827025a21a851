"""Tests for the HTML pages and the redirect endpoint."""

import pytest

from config import Config
from web_app import create_app


@pytest.mark.asyncio
class TestGeneratorPage:
    """Test the generator form."""

    async def test_homepage(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert "QR Generator" in response.text
        assert 'action="http://testserver/create"' in response.text

    async def test_create_renders_result(self, client, store):
        response = await client.post("/create", data={"url": "https://openai.com"})

        assert response.status_code == 200
        assert "Your QR Code" in response.text
        assert "data:image/png;base64," in response.text
        assert "http://testserver/q?url=https%3A%2F%2Fopenai.com" in response.text
        assert "could not be saved" not in response.text
        assert len(store) == 1

    async def test_create_blank_shows_error(self, client, store):
        response = await client.post("/create", data={"url": "  "})

        assert response.status_code == 400
        assert "Destination URL is required" in response.text
        assert "Your QR Code" not in response.text
        assert store.calls["create"] == 0

    async def test_script_destination_never_linked(self, client):
        response = await client.post("/create", data={"url": "javascript:alert(1)"})

        assert response.status_code == 200
        assert 'href="javascript:' not in response.text
        assert 'href="https://javascript:alert(1)"' in response.text

    async def test_create_missing_field(self, client):
        response = await client.post("/create", data={})

        assert response.status_code == 400


@pytest.mark.asyncio
class TestDashboard:
    """Test the dashboard page and its forms."""

    async def test_empty_dashboard(self, client):
        response = await client.get("/dashboard")

        assert response.status_code == 200
        assert "No QR codes yet" in response.text

    async def test_dashboard_lists_records_with_previews(self, manager, client):
        record = (await manager.create("https://example.com/menu")).record

        response = await client.get("/dashboard")

        assert "https://example.com/menu" in response.text
        assert f"http://testserver/q?id={record.id}" in response.text
        assert 'class="preview"' in response.text
        assert record.id in manager.preview_cache

    async def test_dashboard_edit_mode(self, manager, client):
        record = (await manager.create("https://example.com")).record

        response = await client.get("/dashboard", params={"edit": record.id})

        assert f'action="http://testserver/dashboard/{record.id}/edit"' in response.text

    async def test_script_destination_never_linked(self, manager, client):
        await manager.create("javascript:alert(document.cookie)")

        response = await client.get("/dashboard")

        assert 'href="javascript:' not in response.text
        assert 'href="https://javascript:alert(document.cookie)"' in response.text

    async def test_edit_form(self, manager, client):
        record = (await manager.create("https://old.example.com")).record

        response = await client.post(f"/dashboard/{record.id}/edit", data={"url": "https://new.example.com"})

        assert response.status_code == 303
        assert response.headers["location"] == "http://testserver/dashboard?notice=Link+updated"
        assert (await manager.get(record.id)).destination_url == "https://new.example.com"

    async def test_edit_form_blank_stays_in_edit_mode(self, manager, client, store):
        record = (await manager.create("https://example.com")).record

        response = await client.post(f"/dashboard/{record.id}/edit", data={"url": ""})

        assert response.status_code == 303
        assert f"edit={record.id}" in response.headers["location"]
        assert "error=" in response.headers["location"]
        assert store.calls["update"] == 0

    async def test_delete_form(self, manager, client):
        record = (await manager.create("https://example.com")).record

        response = await client.post(f"/dashboard/{record.id}/delete")

        assert response.status_code == 303
        assert response.headers["location"].endswith("notice=Link+deleted")
        assert await manager.list() == []

    async def test_delete_missing_reports_error(self, client):
        response = await client.post("/dashboard/missing/delete")

        assert response.status_code == 303
        assert "error=" in response.headers["location"]

        page = await client.get(response.headers["location"])
        assert "missing" in page.text


@pytest.mark.asyncio
class TestRedirectPage:
    """Test the endpoint scanned codes open."""

    async def test_inline_redirect(self, client):
        response = await client.get("/q", params={"url": "example.com/path"})

        assert response.status_code == 200
        assert "Redirecting..." in response.text
        assert 'data-destination="https://example.com/path"' in response.text
        assert 'data-countdown="3"' in response.text
        assert 'data-navigate-delay-ms="100"' in response.text
        assert 'data-single-timer="false"' in response.text
        assert "location.replace" in response.text

    async def test_created_code_redirects(self, client):
        created = (await client.post("/api/links", json={"url": "https://openai.com"})).json()

        response = await client.get(created["payload_url"])

        assert response.status_code == 200
        assert 'data-destination="https://openai.com"' in response.text

    async def test_by_id_redirect_follows_edit(self, manager, client):
        record = (await manager.create("https://old.example.com")).record
        await manager.edit(record.id, "https://new.example.com")

        response = await client.get("/q", params={"id": record.id})

        assert 'data-destination="https://new.example.com"' in response.text

    async def test_unencoded_nested_query(self, client):
        response = await client.get("/q?url=https://example.com/search?q=1")

        assert response.status_code == 200
        assert 'data-destination="https://example.com/search?q=1"' in response.text

    async def test_missing_identifier(self, client):
        response = await client.get("/q")

        assert response.status_code == 400
        assert "Invalid QR Code" in response.text
        assert "No identifying information present." in response.text
        assert "data-destination" not in response.text

    async def test_deleted_record(self, manager, client):
        record = (await manager.create("https://example.com")).record
        await manager.delete(record.id)

        response = await client.get("/q", params={"id": record.id})

        assert response.status_code == 404
        assert "Record not found or removed." in response.text

    async def test_custom_redirect_settings(self, manager, resolver, client_factory):
        config = Config(
            store_backend="memory",
            redirect_path="/go",
            countdown_seconds=5,
            single_timer=True,
        )
        app = create_app(manager=manager, resolver=resolver, config=config)

        async with client_factory(app) as client:
            response = await client.get("/go", params={"url": "https://example.com"})

        assert response.status_code == 200
        assert 'data-countdown="5"' in response.text
        assert 'data-single-timer="true"' in response.text

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
