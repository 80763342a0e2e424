"""Application validation – RuleViolation, Validator, RuleValidator."""
from __future__ import annotations

import abc
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

__all__ = ["Predicate", "RuleValidator", "RuleViolation", "Validator"]

T = TypeVar("T")

Predicate = Callable[[Any], Union[bool, Awaitable[bool]]]


@dataclass(frozen=True)
class RuleViolation:
    """One failed rule for one field of a request."""

    field: str
    message: str
    code: str = "invalid"
    attempted_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "code": self.code,
            "attempted_value": self.attempted_value,
        }


class Validator(abc.ABC, Generic[T]):
    """Validate requests of one type.

    Subclasses set ``request_type``; the validator is only consulted for
    requests that are instances of it.
    """

    request_type: type[T]

    def applies_to(self, request: Any) -> bool:
        return isinstance(request, self.request_type)

    @abc.abstractmethod
    async def validate(self, request: T) -> list[RuleViolation]: ...


@dataclass(frozen=True)
class _Rule:
    field: str
    predicate: Predicate
    message: str
    code: str


class RuleValidator(Validator[T]):
    """Declarative validator built from field-level predicates.

    Usage::

        validator = (
            RuleValidator(CreateUser)
            .rule("email", lambda v: "@" in v, "must be an email address")
            .rule("age", lambda v: v >= 18, "must be an adult", code="too_young")
        )

    Each predicate receives the field value (``getattr(request, field)``) and
    may be sync or async.  Every rule runs; violations are reported in rule
    order.
    """

    def __init__(self, request_type: type[T]) -> None:
        self.request_type = request_type
        self._rules: list[_Rule] = []

    def rule(
        self,
        field: str,
        predicate: Predicate,
        message: str,
        *,
        code: str = "invalid",
    ) -> "RuleValidator[T]":
        self._rules.append(_Rule(field=field, predicate=predicate, message=message, code=code))
        return self

    async def validate(self, request: T) -> list[RuleViolation]:
        violations: list[RuleViolation] = []
        for rule in self._rules:
            value = getattr(request, rule.field, None)
            outcome = rule.predicate(value)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            if not outcome:
                violations.append(
                    RuleViolation(field=rule.field, message=rule.message, code=rule.code, attempted_value=value)
                )
        return violations

    def __len__(self) -> int:
        return len(self._rules)
