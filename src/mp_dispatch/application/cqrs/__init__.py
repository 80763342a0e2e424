"""Application CQRS – Commands, Queries, handler resolution and the Mediator."""
from mp_dispatch.application.cqrs.commands import Command, CommandHandler
from mp_dispatch.application.cqrs.queries import Query, QueryHandler, result_type_of
from mp_dispatch.application.cqrs.resolver import (
    BehaviorProvider,
    BehaviorRegistry,
    HandlerRegistry,
    HandlerResolver,
)
from mp_dispatch.application.cqrs.mediator import Mediator
from mp_dispatch.application.cqrs.decorators import (
    clear_registries,
    command_handler,
    make_mediator,
    make_registry,
    query_handler,
)

__all__ = [
    "BehaviorProvider",
    "BehaviorRegistry",
    "Command",
    "CommandHandler",
    "HandlerRegistry",
    "HandlerResolver",
    "Mediator",
    "Query",
    "QueryHandler",
    "clear_registries",
    "command_handler",
    "make_mediator",
    "make_registry",
    "query_handler",
    "result_type_of",
]
