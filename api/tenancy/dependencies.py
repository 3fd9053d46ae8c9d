"""
Tenant middleware and the FastAPI dependency that reads its result.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import Request, Response

from .resolver import DEFAULT_TENANT, resolve_tenant

CallNext = Callable[[Request], Awaitable[Response]]


def tenant_middleware(offset: int = 2) -> Callable[[Request, CallNext], Awaitable[Response]]:
    async def set_tenant(request: Request, call_next: CallNext) -> Response:
        request.state.tenant = resolve_tenant(request.url.hostname, offset)
        return await call_next(request)

    return set_tenant


def get_tenant(request: Request) -> str:
    return getattr(request.state, "tenant", DEFAULT_TENANT)
