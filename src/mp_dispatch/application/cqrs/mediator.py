"""Application CQRS – Mediator: resolves a handler and runs it through the pipeline.

Usage::

    registry = HandlerRegistry()
    registry.register_command(CreateOrder, CreateOrderHandler)
    registry.register_query(GetOrder, GetOrderHandler())

    mediator = Mediator(
        registry,
        Pipeline()
        .add(ExceptionLoggingBehavior())
        .add(TimingBehavior())
        .add(ValidationBehavior([CreateOrderValidator()])),
    )
    await mediator.send_command(CreateOrder(item="widget"))
    order = await mediator.send_query(GetOrder(order_id="o-1"))
"""
from __future__ import annotations

from typing import Any, TypeVar

from mp_dispatch.application.cqrs.commands import Command, CommandHandler
from mp_dispatch.application.cqrs.queries import Query, QueryHandler, result_type_of
from mp_dispatch.application.cqrs.resolver import BehaviorProvider, HandlerResolver
from mp_dispatch.application.pipeline.pipeline import Continuation, Pipeline
from mp_dispatch.kernel.errors import BaseError, HandlerFailureError, HandlerNotFoundError
from mp_dispatch.observability.logging import get_logger

R = TypeVar("R")

_NONE_TYPE = type(None)

logger = get_logger(__name__)


class Mediator:
    """Single entry point for commands and queries.

    Each call is independent: the handler is resolved, a fresh continuation is
    composed around it and awaited on the caller's task.  The mediator keeps
    no per-call state.
    """

    def __init__(self, resolver: HandlerResolver, behaviors: BehaviorProvider | None = None) -> None:
        self._resolver = resolver
        self._behaviors: BehaviorProvider = behaviors if behaviors is not None else Pipeline()

    async def send_command(self, command: Command) -> None:
        """Dispatch *command* to its handler through the pipeline."""
        command_type = type(command)
        log = logger.bind(request=command_type.__name__)

        log.debug("dispatch.resolving")
        handler = self._resolver.resolve_command(command_type)
        if handler is None:
            log.error("dispatch.handler_not_found")
            raise HandlerNotFoundError(command_type.__name__)

        async def terminal() -> None:
            await _invoke(handler, command)

        await self._run(command, terminal, _NONE_TYPE, log)

    async def send_query(self, query: Query[R]) -> R:
        """Dispatch *query* to its handler through the pipeline; return its result."""
        query_type = type(query)
        result_type = result_type_of(query_type)
        log = logger.bind(request=query_type.__name__)

        log.debug("dispatch.resolving")
        handler = self._resolver.resolve_query(query_type, result_type)
        if handler is None:
            log.error("dispatch.handler_not_found")
            raise HandlerNotFoundError(query_type.__name__)

        async def terminal() -> R:
            return await _invoke(handler, query)

        return await self._run(query, terminal, result_type, log)

    async def send(self, request: Command | Query[Any]) -> Any:
        """Route *request* to :meth:`send_command` or :meth:`send_query`."""
        if isinstance(request, Command):
            return await self.send_command(request)
        if isinstance(request, Query):
            return await self.send_query(request)
        raise TypeError(f"{type(request).__name__!r} is neither a Command nor a Query")

    async def _run(self, request: Any, terminal: Continuation, response_type: Any, log: Any) -> Any:
        log.debug("dispatch.composing")
        behaviors = self._behaviors.list_behaviors(type(request), response_type)
        chain = Pipeline.compose(request, terminal, behaviors)

        log.debug("dispatch.executing", behaviors=len(behaviors))
        try:
            result = await chain()
        except Exception as exc:
            fields = exc.log_fields() if isinstance(exc, BaseError) else {}
            log.debug("dispatch.failed", error_type=type(exc).__name__, **fields)
            raise
        log.debug("dispatch.completed")
        return result


async def _invoke(handler: CommandHandler[Any] | QueryHandler[Any, Any], request: Any) -> Any:
    try:
        return await handler.handle(request)
    except BaseError:
        raise
    except Exception as exc:
        raise HandlerFailureError(type(request).__name__, exc) from exc


__all__ = ["Mediator"]
