# tests/conftest.py

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from main import create_app

from .fakes import FakeServer


@pytest.fixture()
def settings() -> Settings:
    return Settings(pool_min=1, pool_max=2, pool_timeout_ms=100)


@pytest.fixture()
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture()
def client(settings: Settings, server: FakeServer) -> Iterator[TestClient]:
    """
    TestClient with the lifespan running, so the pool is built from the fake server.
    """
    app = create_app(settings, client_factory=server.client_factory)
    with TestClient(app) as c:
        yield c
