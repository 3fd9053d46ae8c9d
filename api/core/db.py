"""
Tenant-scoped document access (MongoDB).

Each tenant is its own database; collections live inside it. Every call
borrows one client from the pool and hands it back before returning, on
success and failure alike (see `ConnectionPool.connection`).

Pagination:
- results are sorted by `_id` descending (newest first)
- skip = (page - 1) * limit, or 0 when page <= 0
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from bson import ObjectId
from bson.errors import BSONError
from fastapi.encoders import jsonable_encoder
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from .errors import ErrorKind, StoreError
from .pool import ConnectionPool

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

logger = logging.getLogger(__name__)


def _to_jsonable(value: Any) -> Any:
    return jsonable_encoder(value, custom_encoder={ObjectId: str})


def _skip(page: int, limit: int) -> int:
    return (page - 1) * limit if page > 0 else 0


async def find(
    pool: ConnectionPool,
    tenant: str,
    collection: str,
    query: Mapping[str, Any] | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """
    Return one page of `collection` in `tenant`'s database.
    """
    limit = limit or DEFAULT_LIMIT
    page = page or DEFAULT_PAGE
    query = dict(query or {})

    async with pool.connection() as client:
        try:
            cursor = (
                client[tenant][collection]
                .find(query)
                .sort("_id", DESCENDING)
                .skip(_skip(page, limit))
                .limit(limit)
            )
            docs = await cursor.to_list(length=None)
        except (PyMongoError, BSONError) as e:
            logger.exception("store_find_failed tenant=%s collection=%s", tenant, collection)
            raise StoreError(ErrorKind.STORE, f"Find failed: {e}", cause=e) from e

    return {
        "cursor": {"currentPage": page, "perPage": limit},
        "data": _to_jsonable(docs),
    }


async def insert(
    pool: ConnectionPool,
    tenant: str,
    collection: str,
    payload: Mapping[str, Any] | Sequence[Mapping[str, Any]],
) -> dict[str, Any]:
    """
    Insert one document, or a list of documents, into `tenant`'s `collection`.

    The caller's payload is not mutated; the stored copies (with their
    generated `_id`) come back under `ops`.
    """
    many = isinstance(payload, Sequence) and not isinstance(payload, (str, bytes))
    docs = [dict(d) for d in payload] if many else [dict(payload)]

    async with pool.connection() as client:
        try:
            coll = client[tenant][collection]
            if many:
                result = await coll.insert_many(docs)
                inserted_ids = list(result.inserted_ids)
            else:
                result = await coll.insert_one(docs[0])
                inserted_ids = [result.inserted_id]
        except (PyMongoError, BSONError) as e:
            logger.exception("store_insert_failed tenant=%s collection=%s", tenant, collection)
            raise StoreError(ErrorKind.STORE, f"Insert failed: {e}", cause=e) from e

    logger.debug("store_inserted tenant=%s collection=%s count=%d", tenant, collection, len(inserted_ids))
    return {
        "acknowledged": bool(result.acknowledged),
        "insertedCount": len(inserted_ids),
        "insertedIds": _to_jsonable(inserted_ids),
        "ops": _to_jsonable(docs),
    }
