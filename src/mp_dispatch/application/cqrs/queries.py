"""Application CQRS – Query, QueryHandler and result-type introspection."""
from __future__ import annotations

import abc
from typing import Any, Generic, TypeVar, get_args, get_origin

Q = TypeVar("Q", bound="Query[Any]")
R = TypeVar("R")


class Query(Generic[R]):
    """Marker base for queries (read-only intent returning ``R``).

    Declare the result type through the generic base::

        @dataclass(frozen=True)
        class GetOrder(Query[Order]):
            order_id: str
    """


class QueryHandler(abc.ABC, Generic[Q, R]):
    """Handle a single query type and return a result."""

    @abc.abstractmethod
    async def handle(self, query: Q) -> R: ...


def result_type_of(query_type: type[Query[Any]]) -> Any:
    """Return the ``R`` declared by *query_type*'s ``Query[R]`` base.

    Walks the MRO so that subclasses of a parametrised query inherit its
    result type.  Returns :data:`typing.Any` when no concrete type is declared.
    """
    for klass in query_type.__mro__:
        for base in getattr(klass, "__orig_bases__", ()):
            if get_origin(base) is Query:
                args = get_args(base)
                if args and not isinstance(args[0], TypeVar):
                    return args[0]
    return Any


__all__ = ["Query", "QueryHandler", "result_type_of"]
