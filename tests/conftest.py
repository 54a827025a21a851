"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from qrlink.common.logging_config import setup_logging
from qrlink.database.memory import InMemoryLinkStore
from qrlink.encoder import CodeEncoderBase, QRCodeEncoder
from qrlink.errors import EncodeFailure, StoreUnavailable
from qrlink.lifecycle import LinkLifecycleManager
from qrlink.payload import PayloadCodec
from qrlink.resolver import RedirectResolver
from web_app import create_app


class CountingStore(InMemoryLinkStore):
    """In-memory store that counts calls per operation."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls = {"create": 0, "update": 0, "delete": 0, "get_by_id": 0, "list_links": 0}

    async def create(self, destination_url):
        self.calls["create"] += 1
        return await super().create(destination_url)

    async def update(self, record_id, destination_url):
        self.calls["update"] += 1
        return await super().update(record_id, destination_url)

    async def delete(self, record_id):
        self.calls["delete"] += 1
        return await super().delete(record_id)

    async def get_by_id(self, record_id):
        self.calls["get_by_id"] += 1
        return await super().get_by_id(record_id)

    async def list_links(self):
        self.calls["list_links"] += 1
        return await super().list_links()


class UnavailableStore(CountingStore):
    """Store whose writes and lookups fail like a lost backend."""

    async def create(self, destination_url):
        self.calls["create"] += 1
        raise StoreUnavailable("connection refused")

    async def get_by_id(self, record_id):
        self.calls["get_by_id"] += 1
        raise StoreUnavailable("connection refused")


class FailingEncoder(CodeEncoderBase):
    async def render(self, text, options):
        raise EncodeFailure("renderer exploded")


class CountingEncoder(QRCodeEncoder):
    def __init__(self):
        super().__init__()
        self.rendered = []

    async def render(self, text, options):
        self.rendered.append(text)
        return await super().render(text, options)


class RecordingNavigator:
    """Stands in for the browser location; records every navigation."""

    def __init__(self):
        self.visits = []

    def __call__(self, url):
        self.visits.append(url)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store():
    return CountingStore()


@pytest.fixture
def frozen_store():
    """Store whose records all share one creation time."""
    moment = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    return InMemoryLinkStore(clock=lambda: moment)


@pytest.fixture
def encoder():
    return CountingEncoder()


@pytest.fixture
def codec():
    return PayloadCodec(base_url="https://qr.example.org")


@pytest.fixture
def manager(store, encoder, codec, logger):
    return LinkLifecycleManager(store=store, encoder=encoder, codec=codec, logger=logger)


@pytest.fixture
def resolver(store, codec, logger):
    return RedirectResolver(store=store, codec=codec, logger=logger)


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def config():
    return Config(store_backend="memory", base_url="http://testserver")


@pytest.fixture
def app(manager, resolver, config):
    """Create test FastAPI app."""
    return create_app(manager=manager, resolver=resolver, config=config)


@pytest.fixture
def client_factory():
    """Build an HTTP client bound to an app in-process."""
    def factory(app):
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")
    return factory


@pytest.fixture
async def client(app, client_factory):
    """Create test client."""
    async with client_factory(app) as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://openai.com",
        "https://github.com/user/repo",
        "example.com/path",
    ]
