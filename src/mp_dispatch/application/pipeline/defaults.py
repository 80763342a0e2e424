"""Application pipeline – the standard behavior stack built from settings."""
from __future__ import annotations

from typing import Any, Iterable

from mp_dispatch.application.cache import CacheStore
from mp_dispatch.application.pipeline.behavior import PipelineBehavior
from mp_dispatch.application.pipeline.behaviors import (
    CachingBehavior,
    ExceptionLoggingBehavior,
    TimeoutBehavior,
    TimingBehavior,
    ValidationBehavior,
)
from mp_dispatch.application.pipeline.pipeline import Pipeline
from mp_dispatch.application.validation import Validator
from mp_dispatch.config.dispatch import DispatchSettings
from mp_dispatch.kernel.time import Clock


def default_behaviors(
    settings: DispatchSettings | None = None,
    *,
    validators: Iterable[Validator[Any]] = (),
    cache_store: CacheStore | None = None,
    clock: Clock | None = None,
) -> list[PipelineBehavior[Any, Any]]:
    """Return the standard behaviors, outermost first.

    ExceptionLogging wraps everything so it sees every failure; Timing covers
    the remaining pipeline; Timeout (when enabled) bounds validation, cache
    and handler; Validation runs before the cache so invalid queries are never
    cached.
    """
    settings = settings or DispatchSettings()
    behaviors: list[PipelineBehavior[Any, Any]] = [
        ExceptionLoggingBehavior(),
        TimingBehavior(slow_threshold_ms=settings.slow_request_ms or None),
    ]
    if settings.timeout_seconds:
        behaviors.append(TimeoutBehavior(settings.timeout_seconds))
    behaviors.append(ValidationBehavior(validators))
    behaviors.append(CachingBehavior(cache_store, settings.cache_ttl_seconds, clock=clock))
    return behaviors


def default_pipeline(settings: DispatchSettings | None = None, **kwargs: Any) -> Pipeline:
    """:func:`default_behaviors` wrapped in a :class:`Pipeline`."""
    return Pipeline(default_behaviors(settings, **kwargs))


__all__ = ["default_behaviors", "default_pipeline"]
