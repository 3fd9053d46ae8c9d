"""
Task persistence (tenant database, `tasks` collection).
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core import db
from core.pool import ConnectionPool

COLLECTION = "tasks"


async def insert_task(
    pool: ConnectionPool,
    tenant: str,
    payload: Mapping[str, Any] | Sequence[Mapping[str, Any]],
) -> dict[str, Any]:
    return await db.insert(pool, tenant, COLLECTION, payload)


async def find_tasks(
    pool: ConnectionPool,
    tenant: str,
    *,
    filters: Mapping[str, Any] | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    return await db.find(pool, tenant, COLLECTION, filters, page, limit)
