"""Application CQRS – @command_handler and @query_handler auto-registration decorators."""
from __future__ import annotations

from typing import Any

from mp_dispatch.application.cqrs.commands import Command, CommandHandler
from mp_dispatch.application.cqrs.mediator import Mediator
from mp_dispatch.application.cqrs.queries import Query, QueryHandler
from mp_dispatch.application.cqrs.resolver import BehaviorProvider, HandlerRegistry

# ---------------------------------------------------------------------------
# Global registries populated at import time by the decorators
# ---------------------------------------------------------------------------

_COMMAND_REGISTRY: dict[type[Command], type[CommandHandler[Any]]] = {}
_QUERY_REGISTRY: dict[type[Query[Any]], type[QueryHandler[Any, Any]]] = {}


# ---------------------------------------------------------------------------
# Decorators
# ---------------------------------------------------------------------------


def command_handler(command_type: type[Command]):
    """Class decorator that registers a :class:`CommandHandler` for the given
    command type in the global command registry.

    Usage::

        @command_handler(CreateOrder)
        class CreateOrderHandler(CommandHandler[CreateOrder]):
            async def handle(self, command: CreateOrder) -> None:
                ...

    The handler class (no-arg constructor) becomes a per-dispatch factory when
    a mediator is built via :func:`make_mediator`.
    """
    def decorator(handler_class: type[CommandHandler[Any]]) -> type[CommandHandler[Any]]:
        if command_type in _COMMAND_REGISTRY and _COMMAND_REGISTRY[command_type] is not handler_class:
            raise ValueError(
                f"{command_type.__name__!r} already handled by {_COMMAND_REGISTRY[command_type].__name__!r}"
            )
        _COMMAND_REGISTRY[command_type] = handler_class
        return handler_class

    return decorator


def query_handler(query_type: type[Query[Any]]):
    """Class decorator that registers a :class:`QueryHandler` for the given
    query type in the global query registry.

    Usage::

        @query_handler(GetOrderById)
        class GetOrderByIdHandler(QueryHandler[GetOrderById, Order]):
            async def handle(self, query: GetOrderById) -> Order:
                ...
    """
    def decorator(handler_class: type[QueryHandler[Any, Any]]) -> type[QueryHandler[Any, Any]]:
        if query_type in _QUERY_REGISTRY and _QUERY_REGISTRY[query_type] is not handler_class:
            raise ValueError(
                f"{query_type.__name__!r} already handled by {_QUERY_REGISTRY[query_type].__name__!r}"
            )
        _QUERY_REGISTRY[query_type] = handler_class
        return handler_class

    return decorator


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def make_registry(
    extra_commands: dict[type[Command], Any] | None = None,
    extra_queries: dict[type[Query[Any]], Any] | None = None,
) -> HandlerRegistry:
    """Build a :class:`HandlerRegistry` from the global registries.

    *extra_commands* / *extra_queries* replace (or add) handlers without
    touching the global registries – useful in tests.  Values may be handler
    instances or factories.
    """
    registry = HandlerRegistry()
    for cmd_type, handler_class in _COMMAND_REGISTRY.items():
        registry.register_command(cmd_type, handler_class)
    for query_type, handler_class in _QUERY_REGISTRY.items():
        registry.register_query(query_type, handler_class)
    for cmd_type, handler in (extra_commands or {}).items():
        registry.register_command(cmd_type, handler, replace=True)
    for query_type, handler in (extra_queries or {}).items():
        registry.register_query(query_type, handler, replace=True)
    return registry


def make_mediator(
    behaviors: BehaviorProvider | None = None,
    extra_commands: dict[type[Command], Any] | None = None,
    extra_queries: dict[type[Query[Any]], Any] | None = None,
) -> Mediator:
    """Instantiate a :class:`Mediator` over :func:`make_registry`."""
    return Mediator(make_registry(extra_commands, extra_queries), behaviors)


def clear_registries() -> None:
    """Clear both global registries.  Use in tests to avoid inter-test leakage.

    .. warning::
        This mutates module-level state.  Only call in tests.
    """
    _COMMAND_REGISTRY.clear()
    _QUERY_REGISTRY.clear()


__all__ = [
    "clear_registries",
    "command_handler",
    "make_mediator",
    "make_registry",
    "query_handler",
]
