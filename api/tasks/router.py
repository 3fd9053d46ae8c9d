"""
Task API endpoints (mounted under /api/v1).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from core.dependencies import get_pool
from core.errors import DataError, ErrorKind, error_body
from core.pool import ConnectionPool
from tenancy.dependencies import get_tenant

from . import schemas, service

router = APIRouter()

_PAGING_PARAMS = {"page", "limit"}
_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {400: {"model": schemas.ErrorResponse}}


def _error_response(error: DataError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(error.kind, error.message),
    )


def _filters(request: Request) -> dict[str, str]:
    # Remaining query params are plain equality filters; operator keys are dropped.
    return {
        key: value
        for key, value in request.query_params.items()
        if key not in _PAGING_PARAMS and not key.startswith("$")
    }


@router.post(
    "/tasks",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.InsertResult,
    responses=_ERROR_RESPONSES,
)
async def create_task(
    payload: dict[str, Any] | list[dict[str, Any]] = Body(...),
    tenant: str = Depends(get_tenant),
    pool: ConnectionPool = Depends(get_pool),
) -> Any:
    """
    Store a task document (or a list of them) in the tenant's `tasks` collection.
    """
    if isinstance(payload, list) and not payload:
        return _error_response(DataError(ErrorKind.INVALID_REQUEST, "Task list is empty."))

    result = await service.create_task(pool, tenant, payload)
    if not result.is_ok:
        return _error_response(result.error)
    return result.value


@router.get(
    "/tasks",
    response_model=schemas.TaskPage,
    responses=_ERROR_RESPONSES,
)
async def list_tasks(
    request: Request,
    page: int = Query(1),
    limit: int = Query(10, ge=0),
    tenant: str = Depends(get_tenant),
    pool: ConnectionPool = Depends(get_pool),
) -> Any:
    """
    Newest-first page of the tenant's tasks.
    """
    result = await service.find_tasks(
        pool,
        tenant,
        filters=_filters(request),
        page=page,
        limit=limit,
    )
    if not result.is_ok:
        return _error_response(result.error)
    return result.value
