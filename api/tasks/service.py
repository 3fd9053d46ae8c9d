"""
Task business logic.

Data-layer failures never escape as exceptions from here; they come back as
`Result.fail(...)` with the error kind and original cause intact. Anything
that is not already a `DataError` is reported as `UNKNOWN`.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Mapping, Sequence

from core.errors import DataError, ErrorKind, Result
from core.pool import ConnectionPool

from . import repository

logger = logging.getLogger(__name__)


async def _as_result(op: str, tenant: str, call: Awaitable[dict[str, Any]]) -> Result[dict[str, Any]]:
    try:
        return Result.ok(await call)
    except DataError as e:
        logger.warning("task_%s_failed tenant=%s kind=%s", op, tenant, e.kind.value)
        return Result.fail(e)
    except Exception as e:
        logger.exception("task_%s_failed tenant=%s kind=%s", op, tenant, ErrorKind.UNKNOWN.value)
        return Result.fail(DataError(ErrorKind.UNKNOWN, str(e) or type(e).__name__, cause=e))


async def create_task(
    pool: ConnectionPool,
    tenant: str,
    payload: Mapping[str, Any] | Sequence[Mapping[str, Any]],
) -> Result[dict[str, Any]]:
    return await _as_result("create", tenant, repository.insert_task(pool, tenant, payload))


async def find_tasks(
    pool: ConnectionPool,
    tenant: str,
    *,
    filters: Mapping[str, Any] | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> Result[dict[str, Any]]:
    return await _as_result(
        "find",
        tenant,
        repository.find_tasks(pool, tenant, filters=filters, page=page, limit=limit),
    )
