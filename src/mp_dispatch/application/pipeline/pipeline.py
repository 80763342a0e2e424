"""Application pipeline – Pipeline class and continuation composer."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterable, Sequence

from mp_dispatch.application.pipeline.behavior import PipelineBehavior

Continuation = Callable[[], Awaitable[Any]]


class _Link:
    """One behavior bound to its request and downstream continuation."""

    __slots__ = ("_behavior", "_next", "_request")

    def __init__(self, behavior: PipelineBehavior[Any, Any], request: Any, next_: Continuation) -> None:
        self._behavior = behavior
        self._request = request
        self._next = next_

    async def __call__(self) -> Any:
        return await self._behavior(self._request, self._next)

    def __repr__(self) -> str:
        return f"_Link({self._behavior.name} -> {self._next!r})"


class Pipeline:
    """Ordered chain of behaviors around a terminal handler step.

    The first behavior added is the outermost wrapper: it runs first on the
    way in and last on the way out.
    """

    def __init__(self, behaviors: Iterable[PipelineBehavior[Any, Any]] | None = None) -> None:
        self._behaviors: list[PipelineBehavior[Any, Any]] = list(behaviors or [])

    def add(self, behavior: PipelineBehavior[Any, Any]) -> "Pipeline":
        """Append a behavior (fluent API)."""
        self._behaviors.append(behavior)
        return self

    @property
    def behaviors(self) -> tuple[PipelineBehavior[Any, Any], ...]:
        return tuple(self._behaviors)

    def __len__(self) -> int:
        return len(self._behaviors)

    def list_behaviors(self, request_type: type, response_type: Any) -> Sequence[PipelineBehavior[Any, Any]]:  # noqa: ARG002
        """BehaviorProvider view: every behavior applies to every request."""
        return tuple(self._behaviors)

    @staticmethod
    def compose(
        request: Any,
        terminal: Continuation,
        behaviors: Iterable[PipelineBehavior[Any, Any]],
    ) -> Continuation:
        """Fold *behaviors* right-to-left around *terminal*.

        ``[B1, B2, B3]`` yields ``B1(request, B2(request, B3(request, terminal)))``.
        With no behaviors the result is *terminal* itself.  Composition has no
        side effects; each call returns a fresh, independently awaitable chain.
        """
        chain: Continuation = terminal
        for behavior in reversed(tuple(behaviors)):
            chain = _Link(behavior, request, chain)
        return chain

    async def execute(self, request: Any, terminal: Continuation) -> Any:
        """Compose the full chain ending with *terminal* and await it."""
        return await self.compose(request, terminal, self._behaviors)()


__all__ = ["Continuation", "Pipeline"]
