"""Quickstart: a command and a query dispatched through the standard pipeline.

Run with::

    pip install -e .
    DISPATCH_SLOW_REQUEST_MS=5 python docs/examples/quickstart.py

Every dispatch emits a ``request.timed`` JSON line; the invalid command
also emits ``request.validation_failed`` and ``request.failed``.
"""

from __future__ import annotations

import asyncio
import dataclasses

from mp_dispatch.application.cqrs import (
    Command,
    CommandHandler,
    Query,
    QueryHandler,
    command_handler,
    make_mediator,
    query_handler,
)
from mp_dispatch.application.pipeline import default_pipeline
from mp_dispatch.application.validation import RequestValidationError, RuleValidator
from mp_dispatch.config import DispatchSettings
from mp_dispatch.observability import configure_logging, get_logger

logger = get_logger(__name__)

_ORDERS: dict[str, int] = {}


# ---------------------------------------------------------------------------
# Requests and handlers
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class PlaceOrder(Command):
    order_id: str
    quantity: int


@dataclasses.dataclass(frozen=True)
class GetQuantity(Query[int]):
    order_id: str


@command_handler(PlaceOrder)
class PlaceOrderHandler(CommandHandler[PlaceOrder]):
    async def handle(self, command: PlaceOrder) -> None:
        _ORDERS[command.order_id] = command.quantity


@query_handler(GetQuantity)
class GetQuantityHandler(QueryHandler[GetQuantity, int]):
    async def handle(self, query: GetQuantity) -> int:
        await asyncio.sleep(0.01)
        return _ORDERS.get(query.order_id, 0)


place_order_rules = RuleValidator(PlaceOrder).rule(
    "quantity", lambda q: q > 0, "must be positive", code="not_positive"
)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def main() -> None:
    settings = DispatchSettings.load()
    configure_logging(settings)
    logger.info("quickstart.settings", **settings.to_dict())
    mediator = make_mediator(default_pipeline(settings, validators=[place_order_rules]))

    await mediator.send(PlaceOrder("o-1", 3))
    first = await mediator.send(GetQuantity("o-1"))
    second = await mediator.send(GetQuantity("o-1"))  # served from cache
    logger.info("quickstart.quantity", first=first, second=second)

    try:
        await mediator.send(PlaceOrder("o-2", 0))
    except RequestValidationError as exc:
        logger.info("quickstart.rejected", errors=exc.errors)


if __name__ == "__main__":
    asyncio.run(main())
