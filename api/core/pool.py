"""
Bounded pool of database client handles.

The application creates one pool on startup and closes it on shutdown
(see `api/main.py`). Each handle is lent to exactly one caller at a time:

    async with pool.connection() as client:
        ...

Callers beyond `max_size` wait in FIFO order until a handle is released.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, TypeVar

from pymongo import AsyncMongoClient

from .config import Settings
from .errors import ErrorKind, PoolError

H = TypeVar("H")

logger = logging.getLogger(__name__)


class ConnectionPool(Generic[H]):
    def __init__(
        self,
        create: Callable[[], Awaitable[H]],
        destroy: Callable[[H], Awaitable[None]],
        *,
        min_size: int = 1,
        max_size: int = 100,
        acquire_timeout: float | None = None,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        if min_size < 0 or min_size > max_size:
            raise ValueError("min_size must be between 0 and max_size")

        self._create = create
        self._destroy = destroy
        self.min_size = min_size
        self.max_size = max_size
        self.acquire_timeout = acquire_timeout

        self._idle: deque[H] = deque()
        self._borrowed: dict[int, H] = {}
        self._slots = asyncio.Semaphore(max_size)
        self._pending = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def size(self) -> int:
        return len(self._idle) + len(self._borrowed)

    async def start(self) -> None:
        """
        Create `min_size` idle handles up front.

        A failure here is not fatal: missing handles are created on demand.
        """
        while len(self._idle) < self.min_size and not self._closed:
            try:
                handle = await self._create()
            except Exception:
                logger.warning("pool_prefill_failed size=%d min=%d", self.size, self.min_size, exc_info=True)
                return
            self._idle.append(handle)
        logger.info("pool_started size=%d min=%d max=%d", self.size, self.min_size, self.max_size)

    async def acquire(self) -> H:
        if self._closed:
            raise PoolError(ErrorKind.POOL_CLOSED, "Connection pool is closed.")

        self._pending += 1
        try:
            if self.acquire_timeout is None:
                await self._slots.acquire()
            else:
                await asyncio.wait_for(self._slots.acquire(), timeout=self.acquire_timeout)
        except asyncio.TimeoutError as e:
            raise PoolError(
                ErrorKind.POOL_TIMEOUT,
                f"Timed out after {self.acquire_timeout}s waiting for a connection.",
                cause=e,
            ) from e
        finally:
            self._pending -= 1

        if self._closed:
            self._slots.release()
            raise PoolError(ErrorKind.POOL_CLOSED, "Connection pool is closed.")

        if self._idle:
            handle = self._idle.popleft()
        else:
            try:
                handle = await self._create()
            except Exception as e:
                self._slots.release()
                logger.warning("pool_create_failed size=%d error=%s", self.size, e)
                raise PoolError(ErrorKind.CONNECT, f"Failed to open a connection: {e}", cause=e) from e
            except BaseException:
                self._slots.release()
                raise

        self._borrowed[id(handle)] = handle
        return handle

    async def release(self, handle: H) -> None:
        if self._borrowed.pop(id(handle), None) is None:
            raise ValueError("Handle was not borrowed from this pool.")

        if self._closed:
            await self._destroy_handle(handle)
        else:
            self._idle.append(handle)
        self._slots.release()

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[H]:
        handle = await self.acquire()
        try:
            yield handle
        finally:
            await self.release(handle)

    async def close(self) -> None:
        if self._closed:
            return None
        self._closed = True
        while self._idle:
            await self._destroy_handle(self._idle.popleft())
        logger.info("pool_closed borrowed=%d", len(self._borrowed))

    def stats(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "available": len(self._idle),
            "borrowed": len(self._borrowed),
            "pending": self._pending,
            "min": self.min_size,
            "max": self.max_size,
            "closed": self._closed,
        }

    async def _destroy_handle(self, handle: H) -> None:
        try:
            await self._destroy(handle)
        except Exception:
            logger.exception("pool_destroy_failed")


ClientFactory = Callable[..., Any]


def mongo_pool(settings: Settings, client_factory: ClientFactory | None = None) -> ConnectionPool:
    """
    Pool of single-connection `AsyncMongoClient` handles.

    `client_factory` takes the same arguments as `AsyncMongoClient`; tests
    pass an in-memory fake.
    """
    factory = client_factory or AsyncMongoClient
    url = settings.mongo_url()
    timeout_ms = settings.pool_timeout_ms

    async def create() -> Any:
        client = factory(
            url,
            maxPoolSize=1,
            connectTimeoutMS=timeout_ms,
            serverSelectionTimeoutMS=timeout_ms,
        )
        # Clients connect lazily; ping so a dead server fails this acquire.
        try:
            await client.admin.command("ping")
        except Exception:
            await client.close()
            raise
        logger.debug("mongo_client_created host=%s port=%s", settings.mongo_host, settings.mongo_port)
        return client

    async def destroy(client: Any) -> None:
        await client.close()

    acquire_timeout = settings.pool_acquire_timeout_ms / 1000 if settings.pool_acquire_timeout_ms > 0 else None
    return ConnectionPool(
        create,
        destroy,
        min_size=settings.pool_min,
        max_size=settings.pool_max,
        acquire_timeout=acquire_timeout,
    )
