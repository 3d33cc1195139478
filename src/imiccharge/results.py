"""Typed outcome of a backend API operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import ApiError, ErrorKind

T = TypeVar("T")
D = TypeVar("D")


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """
    Either a decoded value or the error that prevented one.

    Exactly one of ``value`` and ``error`` is meaningful: ``error`` is None
    on success.
    """

    value: T | None = None
    error: ApiError | None = None

    @classmethod
    def success(cls, value: T) -> "ApiResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ApiError) -> "ApiResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        """Error kind, or None for a successful result."""
        return self.error.kind if self.error is not None else None

    def unwrap_or(self, default: D) -> T | D:
        """Collapse to the value, or ``default`` on any failure."""
        if self.error is not None:
            return default
        return self.value
