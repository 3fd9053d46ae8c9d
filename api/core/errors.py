"""
Error kinds and the result-or-error type shared by the data and model layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    POOL_TIMEOUT = "POOL_TIMEOUT"
    POOL_CLOSED = "POOL_CLOSED"
    CONNECT = "CONNECT"
    STORE = "STORE"
    INVALID_REQUEST = "INVALID_REQUEST"
    UNKNOWN = "UNKNOWN"


class DataError(RuntimeError):
    """
    A failure with a typed kind and the exception that caused it.
    """

    def __init__(self, kind: ErrorKind, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, message={self.message!r})"


# Acquire-side failures: timeout waiting for a handle, connect failure, closed pool.
class PoolError(DataError):
    pass


# Query/insert failures reported by the driver.
class StoreError(DataError):
    pass


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: DataError | None = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: DataError) -> "Result[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None


def error_body(kind: ErrorKind, message: str) -> dict[str, Any]:
    return {"error": {"code": kind.value, "message": message}}
