"""Application pipeline – PipelineBehavior base."""
from __future__ import annotations

import abc
from typing import Any, Awaitable, Callable, Generic, TypeVar

TRequest = TypeVar("TRequest")
TResponse = TypeVar("TResponse")

Next = Callable[[], Awaitable[Any]]
"""Zero-argument continuation: the remaining behaviors, then the handler."""


class PipelineBehavior(abc.ABC, Generic[TRequest, TResponse]):
    """Single node in the behavior chain.

    ``next_`` must be awaited at most once per invocation.  Not awaiting it
    short-circuits the pipeline; the handler is never reached.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abc.abstractmethod
    async def __call__(self, request: TRequest, next_: Next) -> TResponse: ...


__all__ = ["Next", "PipelineBehavior"]
