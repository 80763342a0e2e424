"""Shared fixtures for mediator benchmarks.

One event loop serves the whole session, so loop start-up stays out of
the measured dispatch latency.  ``registry`` holds a command and a query
handler; ``mediator_with`` builds a :class:`Mediator` over it behind any
number of pass-through behaviors.
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Callable

import pytest

from mp_dispatch.application.cqrs import (
    Command,
    CommandHandler,
    HandlerRegistry,
    Mediator,
    Query,
    QueryHandler,
)
from mp_dispatch.application.pipeline import Next, Pipeline, PipelineBehavior


class PlaceOrder(Command):
    """Minimal command used only in benchmarks."""


class PlaceOrderHandler(CommandHandler[PlaceOrder]):
    async def handle(self, command: PlaceOrder) -> None:
        return None


@dataclasses.dataclass(frozen=True)
class GetOrder(Query[str]):
    order_id: str


class GetOrderHandler(QueryHandler[GetOrder, str]):
    async def handle(self, query: GetOrder) -> str:
        return query.order_id


class NoOpBehavior(PipelineBehavior[Any, Any]):
    async def __call__(self, request: Any, next_: Next) -> Any:
        return await next_()


@pytest.fixture(scope="session")
def event_loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture(scope="session")
def dispatch(event_loop) -> Callable[[Any], Any]:
    """Run one ``mediator.send*`` coroutine to completion on the session loop."""

    def _run(coro):
        return event_loop.run_until_complete(coro)

    return _run


@pytest.fixture
def registry() -> HandlerRegistry:
    registry = HandlerRegistry()
    registry.register_command(PlaceOrder, PlaceOrderHandler())
    registry.register_query(GetOrder, GetOrderHandler())
    return registry


@pytest.fixture
def mediator_with(registry: HandlerRegistry) -> Callable[..., Mediator]:
    """``mediator_with(5)`` wraps five no-op behaviors; extra behaviors go innermost."""

    def _build(noops: int = 0, *extra: PipelineBehavior[Any, Any]) -> Mediator:
        pipeline = Pipeline([NoOpBehavior() for _ in range(noops)])
        for behavior in extra:
            pipeline.add(behavior)
        return Mediator(registry, pipeline)

    return _build


@pytest.fixture
def place_order() -> PlaceOrder:
    return PlaceOrder()


@pytest.fixture
def get_order() -> GetOrder:
    return GetOrder("o-1")
