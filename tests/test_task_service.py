# tests/test_task_service.py

from __future__ import annotations

import pytest

from core.config import Settings
from core.errors import ErrorKind
from core.pool import mongo_pool
from tasks import repository, service

from .fakes import FakeServer


@pytest.fixture()
def pool():
    return mongo_pool(Settings(pool_min=0, pool_max=1), FakeServer().client_factory)


@pytest.mark.asyncio
async def test_create_task_ok(pool):
    result = await service.create_task(pool, "acme", {"title": "x"})

    assert result.is_ok
    assert result.value["insertedCount"] == 1


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_unknown_with_cause(pool, monkeypatch: pytest.MonkeyPatch):
    boom = RuntimeError("disk on fire")

    async def fail(*args, **kwargs):
        raise boom

    monkeypatch.setattr(repository, "insert_task", fail)
    monkeypatch.setattr(repository, "find_tasks", fail)

    created = await service.create_task(pool, "acme", {"title": "x"})
    found = await service.find_tasks(pool, "acme")

    for result in (created, found):
        assert not result.is_ok
        assert result.error.kind is ErrorKind.UNKNOWN
        assert result.error.cause is boom
        assert result.error.message == "disk on fire"


@pytest.mark.asyncio
async def test_invalid_tenant_keeps_store_kind(pool):
    created = await service.create_task(pool, "bad$name", {"title": "x"})
    found = await service.find_tasks(pool, "bad$name")

    assert created.error.kind is ErrorKind.STORE
    assert found.error.kind is ErrorKind.STORE
    assert created.error.cause is not None
