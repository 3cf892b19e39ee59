"""Shared fixtures for the catalog tests.

Handler tests drive ``CatalogHandler`` directly against an in-memory
store with a frozen clock. API tests go through FastAPI's TestClient
using an app built with explicit settings, so nothing depends on the
caller's environment.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from imagecat.catalog.auth import TokenAuthorizer
from imagecat.catalog.handler import CatalogHandler
from imagecat.catalog.store import InMemoryImageStore
from imagecat.config import Settings
from imagecat.main import create_app

TOKEN = "test-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}
NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return InMemoryImageStore()


@pytest.fixture
def handler(store):
    return CatalogHandler(store, TokenAuthorizer([TOKEN]), clock=lambda: NOW)


@pytest.fixture
def register(handler):
    """Register an image with sensible defaults and return its id."""

    def _register(**overrides):
        fields = dict(
            title="Sunset",
            description="d",
            keywords="nature,sky",
            author="A",
            creator="C",
            capture="2023-05-01",
            payload="aGVsbG8=",
        )
        fields.update(overrides)
        outcome = handler.register(AUTH, **fields)
        return outcome.data["id"]

    return _register


@pytest.fixture
def client(store):
    settings = Settings(api_tokens=frozenset({TOKEN}), login_url="/login")
    app = create_app(settings, store=store)
    return TestClient(app)
