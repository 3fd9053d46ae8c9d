# tests/test_db.py

from __future__ import annotations

import pytest

from core import db
from core.config import Settings
from core.errors import ErrorKind, StoreError
from core.pool import mongo_pool

from .fakes import FakeServer


@pytest.fixture()
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture()
def pool(server: FakeServer):
    return mongo_pool(Settings(pool_min=0, pool_max=2), server.client_factory)


async def _seed(pool, tenant: str, count: int) -> None:
    for n in range(count):
        await db.insert(pool, tenant, "tasks", {"n": n})


@pytest.mark.asyncio
async def test_find_defaults_to_first_page_of_ten(pool):
    await _seed(pool, "acme", 12)

    page = await db.find(pool, "acme", "tasks")

    assert page["cursor"] == {"currentPage": 1, "perPage": 10}
    assert [d["n"] for d in page["data"]] == list(range(11, 1, -1))


@pytest.mark.asyncio
async def test_find_second_page_skips_newest(pool):
    await _seed(pool, "acme", 12)

    page = await db.find(pool, "acme", "tasks", page=2, limit=5)

    assert page["cursor"] == {"currentPage": 2, "perPage": 5}
    assert [d["n"] for d in page["data"]] == [6, 5, 4, 3, 2]


@pytest.mark.asyncio
async def test_find_non_positive_page_starts_at_zero(pool):
    await _seed(pool, "acme", 3)

    page = await db.find(pool, "acme", "tasks", page=-1, limit=2)

    assert page["cursor"] == {"currentPage": -1, "perPage": 2}
    assert [d["n"] for d in page["data"]] == [2, 1]


@pytest.mark.asyncio
async def test_find_applies_filter(pool):
    await db.insert(pool, "acme", "tasks", {"status": "open"})
    await db.insert(pool, "acme", "tasks", {"status": "done"})

    page = await db.find(pool, "acme", "tasks", {"status": "done"})

    assert [d["status"] for d in page["data"]] == ["done"]


@pytest.mark.asyncio
async def test_insert_one_returns_acknowledgment(pool, server):
    payload = {"title": "write report"}

    result = await db.insert(pool, "acme", "tasks", payload)

    assert result["acknowledged"] is True
    assert result["insertedCount"] == 1
    stored_id = server.documents("acme", "tasks")[0]["_id"]
    assert result["insertedIds"] == [str(stored_id)]
    assert result["ops"] == [{"title": "write report", "_id": str(stored_id)}]
    assert "_id" not in payload


@pytest.mark.asyncio
async def test_insert_many(pool, server):
    result = await db.insert(pool, "acme", "tasks", [{"n": 1}, {"n": 2}])

    assert result["insertedCount"] == 2
    assert len(server.documents("acme", "tasks")) == 2


@pytest.mark.asyncio
async def test_tenants_are_isolated(pool):
    await db.insert(pool, "acme", "tasks", {"owner": "acme"})
    await db.insert(pool, "globex", "tasks", {"owner": "globex"})

    acme = await db.find(pool, "acme", "tasks")
    globex = await db.find(pool, "globex", "tasks")

    assert [d["owner"] for d in acme["data"]] == ["acme"]
    assert [d["owner"] for d in globex["data"]] == ["globex"]


@pytest.mark.asyncio
async def test_store_errors_are_wrapped_and_connection_released(pool, server):
    server.fail_ops = True

    with pytest.raises(StoreError) as info:
        await db.find(pool, "acme", "tasks")
    assert info.value.kind is ErrorKind.STORE
    assert info.value.cause is not None

    with pytest.raises(StoreError):
        await db.insert(pool, "acme", "tasks", {"n": 1})

    assert pool.stats()["borrowed"] == 0
    assert pool.stats()["available"] == 1


@pytest.mark.asyncio
async def test_invalid_tenant_name_is_a_store_error(pool):
    with pytest.raises(StoreError) as found:
        await db.find(pool, "bad$name", "tasks")
    assert found.value.kind is ErrorKind.STORE

    with pytest.raises(StoreError) as inserted:
        await db.insert(pool, "bad$name", "tasks", {"n": 1})
    assert inserted.value.kind is ErrorKind.STORE

    assert pool.stats()["borrowed"] == 0
