"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   └── ValidationError
    └── ApplicationError         (application.py)
        ├── DispatchError
        │   ├── HandlerNotFoundError
        │   ├── AmbiguousHandlerError
        │   └── HandlerFailureError
        ├── BehaviorError
        │   └── CacheBackendError
        └── TimeoutError
"""

from mp_dispatch.kernel.errors.application import (
    AmbiguousHandlerError,
    ApplicationError,
    BehaviorError,
    CacheBackendError,
    DispatchError,
    HandlerFailureError,
    HandlerNotFoundError,
    TimeoutError,
)
from mp_dispatch.kernel.errors.base import BaseError
from mp_dispatch.kernel.errors.domain import DomainError, ValidationError

DispatchTimeoutError = TimeoutError

__all__ = [
    "AmbiguousHandlerError",
    "ApplicationError",
    "BaseError",
    "BehaviorError",
    "CacheBackendError",
    "DispatchError",
    "DispatchTimeoutError",
    "DomainError",
    "HandlerFailureError",
    "HandlerNotFoundError",
    "TimeoutError",
    "ValidationError",
]
