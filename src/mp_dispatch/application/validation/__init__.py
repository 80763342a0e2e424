"""Application validation – request validators and their errors."""
from mp_dispatch.application.validation.errors import RequestValidationError
from mp_dispatch.application.validation.validator import Predicate, RuleValidator, RuleViolation, Validator

__all__ = ["Predicate", "RequestValidationError", "RuleValidator", "RuleViolation", "Validator"]
