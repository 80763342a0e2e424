"""Application – request dispatch building blocks (framework-agnostic)."""

from mp_dispatch.application.cqrs import (
    BehaviorRegistry,
    Command,
    CommandHandler,
    HandlerRegistry,
    Mediator,
    Query,
    QueryHandler,
)
from mp_dispatch.application.pipeline import Pipeline, PipelineBehavior
from mp_dispatch.application.validation import RequestValidationError, RuleValidator, Validator

__all__ = [
    "BehaviorRegistry",
    "Command",
    "CommandHandler",
    "HandlerRegistry",
    "Mediator",
    "Pipeline",
    "PipelineBehavior",
    "Query",
    "QueryHandler",
    "RequestValidationError",
    "RuleValidator",
    "Validator",
]
