"""Application-layer errors: dispatch and pipeline failures."""

from __future__ import annotations

from typing import Any

from mp_dispatch.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class DispatchError(ApplicationError):
    """A request could not be routed to, or completed by, its handler."""

    default_code = "dispatch_error"

    def __init__(self, message: str, *, request_type: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.request_type = request_type
        if request_type is not None:
            self.detail.setdefault("request_type", request_type)


class HandlerNotFoundError(DispatchError):
    """No handler is registered for the request's concrete type."""

    default_code = "handler_not_found"
    stage = "resolving"

    def __init__(self, request_type: str, **kwargs: Any) -> None:
        super().__init__(f"No handler registered for {request_type!r}", request_type=request_type, **kwargs)


class AmbiguousHandlerError(DispatchError):
    """More than one handler is registered for the request's concrete type."""

    default_code = "ambiguous_handler"
    stage = "resolving"

    def __init__(self, request_type: str, candidates: int, **kwargs: Any) -> None:
        super().__init__(
            f"{candidates} handlers registered for {request_type!r}; expected exactly one",
            request_type=request_type,
            **kwargs,
        )
        self.candidates = candidates


class HandlerFailureError(DispatchError):
    """The handler raised an exception outside the error hierarchy.

    The original exception is kept as ``cause`` (and ``__cause__``).
    """

    default_code = "handler_failure"
    stage = "handler"

    def __init__(self, request_type: str, cause: BaseException, **kwargs: Any) -> None:
        super().__init__(
            f"Handler for {request_type!r} failed: {cause!r}",
            request_type=request_type,
            cause=cause,
            **kwargs,
        )


class BehaviorError(ApplicationError):
    """A pipeline behavior failed for reasons unrelated to validation."""

    default_code = "behavior_error"
    stage = "behavior"

    def __init__(self, message: str, *, behavior: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.behavior = behavior


class CacheBackendError(BehaviorError):
    """The cache store backing a caching behavior raised."""

    default_code = "cache_backend_error"


class TimeoutError(ApplicationError):  # noqa: A001
    """Operation timed out."""

    default_code = "timeout"
    stage = "behavior"


__all__ = [
    "AmbiguousHandlerError",
    "ApplicationError",
    "BehaviorError",
    "CacheBackendError",
    "DispatchError",
    "HandlerFailureError",
    "HandlerNotFoundError",
    "TimeoutError",
]
