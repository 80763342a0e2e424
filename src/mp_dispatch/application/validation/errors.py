"""Application validation errors."""
from __future__ import annotations

from typing import Any, Sequence

from mp_dispatch.application.validation.validator import RuleViolation
from mp_dispatch.kernel.errors import ValidationError


class RequestValidationError(ValidationError):
    """A request failed one or more validation rules before reaching its handler."""

    default_code = "request_validation_failed"
    stage = "validation"

    def __init__(self, request_type: str, violations: Sequence[RuleViolation], **kwargs: Any) -> None:
        super().__init__(
            f"Validation failed for {request_type!r}: {len(violations)} violation(s)",
            errors=[v.to_dict() for v in violations],
            **kwargs,
        )
        self.request_type = request_type
        self.violations: list[RuleViolation] = list(violations)


__all__ = ["RequestValidationError"]
