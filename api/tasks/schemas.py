"""
Pydantic schemas for task endpoints.

Task documents themselves are schemaless; only the envelopes are modelled.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class PageCursor(BaseModel):
    currentPage: int
    perPage: int


class TaskPage(BaseModel):
    cursor: PageCursor
    data: list[dict[str, Any]]


class InsertResult(BaseModel):
    acknowledged: bool
    insertedCount: int
    insertedIds: list[Any]
    ops: list[dict[str, Any]]


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
