"""
Core Type Definitions and Exceptions

Error taxonomy shared by the transport, normalizer and the components that
turn failures into empty results.
"""
from __future__ import annotations

from typing import Any, Optional


class NewsDeskError(Exception):
    """Base exception for all news desk errors."""

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class TransportError(NewsDeskError):
    """Raised on network failure, timeout, non-2xx status or an unreadable body."""

    def __init__(
        self,
        message: str,
        path: str,
        status: Optional[int] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["path"] = path
        if status is not None:
            ctx["status"] = status
        super().__init__(message, ctx)
        self.path = path
        self.status = status


class MalformedResponse(NewsDeskError):
    """Raised when a response body does not have the expected shape."""

    def __init__(
        self,
        message: str,
        path: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["path"] = path
        super().__init__(message, ctx)
        self.path = path


class ValidationError(NewsDeskError):
    """Raised when a raw news record cannot be normalized."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        if field:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = repr(value)[:100]  # Truncate long values
        super().__init__(message, ctx)
        self.field = field
        self.value = value
