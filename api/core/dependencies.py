"""
FastAPI dependencies for shared resources created in the app lifespan.
"""

from __future__ import annotations

from fastapi import Request

from .errors import ErrorKind, PoolError
from .pool import ConnectionPool


def get_pool(request: Request) -> ConnectionPool:
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise PoolError(ErrorKind.POOL_CLOSED, "Connection pool is not initialized.")
    return pool
