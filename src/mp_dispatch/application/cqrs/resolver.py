"""Application CQRS – handler resolution and behavior provision ports.

The mediator consumes two ports:

* :class:`HandlerResolver` maps a request's concrete type to its single
  handler (``None`` when absent, :class:`AmbiguousHandlerError` when more than
  one registration matches).
* :class:`BehaviorProvider` returns the ordered behaviors for a
  ``(request_type, response_type)`` pair.  Order is authoritative.

:class:`HandlerRegistry` and :class:`BehaviorRegistry` are static, in-memory
implementations populated at startup.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Protocol, Sequence, Union, runtime_checkable

from mp_dispatch.application.cqrs.commands import Command, CommandHandler
from mp_dispatch.application.cqrs.queries import Query, QueryHandler, result_type_of
from mp_dispatch.application.pipeline.behavior import PipelineBehavior
from mp_dispatch.kernel.errors import AmbiguousHandlerError

CommandHandlerSource = Union[CommandHandler[Any], Callable[[], CommandHandler[Any]]]
QueryHandlerSource = Union[QueryHandler[Any, Any], Callable[[], QueryHandler[Any, Any]]]


@runtime_checkable
class HandlerResolver(Protocol):
    """Port: look up the single handler for a request type."""

    def resolve_command(self, command_type: type[Command]) -> CommandHandler[Any] | None: ...

    def resolve_query(self, query_type: type[Query[Any]], result_type: Any) -> QueryHandler[Any, Any] | None: ...


@runtime_checkable
class BehaviorProvider(Protocol):
    """Port: ordered behaviors for a request/response pair."""

    def list_behaviors(self, request_type: type, response_type: Any) -> Sequence[PipelineBehavior[Any, Any]]: ...


def _instantiate(source: Any, handler_base: type) -> Any:
    # Instances are reused; classes and factories produce one handler per resolve.
    if isinstance(source, handler_base):
        return source
    return source()


class HandlerRegistry:
    """Type-keyed handler registry.

    Register either a handler instance (reused across dispatches) or a
    zero-argument factory / handler class (a fresh instance per dispatch).
    Registering twice for the same key without ``replace=True`` keeps both,
    which surfaces as :class:`AmbiguousHandlerError` on resolution.
    """

    def __init__(self) -> None:
        self._commands: dict[type[Command], list[CommandHandlerSource]] = {}
        self._queries: dict[tuple[type[Query[Any]], Any], list[QueryHandlerSource]] = {}

    def register_command(
        self,
        command_type: type[Command],
        handler: CommandHandlerSource,
        *,
        replace: bool = False,
    ) -> None:
        if not (isinstance(command_type, type) and issubclass(command_type, Command)):
            raise TypeError(f"{command_type!r} is not a Command subclass")
        if replace:
            self._commands[command_type] = [handler]
        else:
            self._commands.setdefault(command_type, []).append(handler)

    def register_query(
        self,
        query_type: type[Query[Any]],
        handler: QueryHandlerSource,
        *,
        result_type: Any = None,
        replace: bool = False,
    ) -> None:
        """Register *handler* for ``(query_type, result_type)``.

        *result_type* defaults to the ``R`` declared by ``Query[R]``.
        """
        if not (isinstance(query_type, type) and issubclass(query_type, Query)):
            raise TypeError(f"{query_type!r} is not a Query subclass")
        key = (query_type, result_type if result_type is not None else result_type_of(query_type))
        if replace:
            self._queries[key] = [handler]
        else:
            self._queries.setdefault(key, []).append(handler)

    def resolve_command(self, command_type: type[Command]) -> CommandHandler[Any] | None:
        sources = self._commands.get(command_type, [])
        if len(sources) > 1:
            raise AmbiguousHandlerError(command_type.__name__, len(sources))
        return _instantiate(sources[0], CommandHandler) if sources else None

    def resolve_query(self, query_type: type[Query[Any]], result_type: Any) -> QueryHandler[Any, Any] | None:
        sources = self._queries.get((query_type, result_type), [])
        if len(sources) > 1:
            raise AmbiguousHandlerError(query_type.__name__, len(sources))
        return _instantiate(sources[0], QueryHandler) if sources else None

    def __contains__(self, request_type: object) -> bool:
        if request_type in self._commands:
            return True
        return any(key[0] is request_type for key in self._queries)


class BehaviorRegistry:
    """Ordered behavior list with optional per-behavior request-type scoping.

    A behavior added with ``request_types`` is only listed for requests that
    are subclasses of one of those types.  Relative order is never changed.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[PipelineBehavior[Any, Any], tuple[type, ...] | None]] = []

    def add(
        self,
        behavior: PipelineBehavior[Any, Any],
        *,
        request_types: Iterable[type] | None = None,
    ) -> "BehaviorRegistry":
        """Append *behavior* (fluent API)."""
        scope = tuple(request_types) if request_types is not None else None
        self._entries.append((behavior, scope))
        return self

    def list_behaviors(self, request_type: type, response_type: Any) -> Sequence[PipelineBehavior[Any, Any]]:  # noqa: ARG002
        return tuple(
            behavior
            for behavior, scope in self._entries
            if scope is None or issubclass(request_type, scope)
        )

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "BehaviorProvider",
    "BehaviorRegistry",
    "CommandHandlerSource",
    "HandlerRegistry",
    "HandlerResolver",
    "QueryHandlerSource",
]
