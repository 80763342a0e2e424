"""Application pipeline – built-in behavior implementations."""
from __future__ import annotations

import asyncio
import time
from typing import Any, Iterable

from mp_dispatch.application.cache import CacheEntry, CacheKey, CacheStore, InMemoryCacheStore
from mp_dispatch.application.cqrs.queries import Query
from mp_dispatch.application.pipeline.behavior import Next, PipelineBehavior
from mp_dispatch.application.validation import RequestValidationError, RuleViolation, Validator
from mp_dispatch.kernel.errors import BaseError, CacheBackendError, DispatchTimeoutError
from mp_dispatch.kernel.time import Clock
from mp_dispatch.observability.logging import get_logger

logger = get_logger(__name__)


class TimingBehavior(PipelineBehavior[Any, Any]):
    """Log how long everything downstream took.

    Emits ``request.timed`` with ``request`` and ``elapsed_ms``.  When
    *slow_threshold_ms* is set and exceeded, the record is a warning with
    ``slow=True``.  Failed calls are timed too, then re-raised untouched.
    """

    def __init__(self, slow_threshold_ms: float | None = None, *, log: Any = None) -> None:
        self._slow_threshold_ms = slow_threshold_ms
        self._log = log if log is not None else logger

    async def __call__(self, request: Any, next_: Next) -> Any:
        name = type(request).__name__
        start = time.perf_counter()
        try:
            result = await next_()
        except Exception:
            self._log.info("request.timed", request=name, elapsed_ms=self._elapsed_ms(start), outcome="error")
            raise
        elapsed_ms = self._elapsed_ms(start)
        if self._slow_threshold_ms is not None and elapsed_ms > self._slow_threshold_ms:
            self._log.warning("request.timed", request=name, elapsed_ms=elapsed_ms, outcome="ok", slow=True)
        else:
            self._log.info("request.timed", request=name, elapsed_ms=elapsed_ms, outcome="ok")
        return result

    @staticmethod
    def _elapsed_ms(start: float) -> float:
        return round((time.perf_counter() - start) * 1000, 3)


class ExceptionLoggingBehavior(PipelineBehavior[Any, Any]):
    """Log any failure from downstream, then re-raise the same exception."""

    def __init__(self, *, log: Any = None) -> None:
        self._log = log if log is not None else logger

    async def __call__(self, request: Any, next_: Next) -> Any:
        try:
            return await next_()
        except Exception as exc:
            fields = exc.log_fields() if isinstance(exc, BaseError) else {}
            self._log.error(
                "request.failed",
                request=type(request).__name__,
                error_type=type(exc).__name__,
                error=repr(exc),
                exc_info=True,
                **fields,
            )
            raise


class ValidationBehavior(PipelineBehavior[Any, Any]):
    """Run the applicable validators before anything downstream.

    Validators run concurrently.  If any rule is violated the handler is never
    reached and :class:`RequestValidationError` carries every violation, in
    validator registration order.
    """

    def __init__(self, validators: Iterable[Validator[Any]] = (), *, log: Any = None) -> None:
        self._validators: list[Validator[Any]] = list(validators)
        self._log = log if log is not None else logger

    def add(self, validator: Validator[Any]) -> "ValidationBehavior":
        self._validators.append(validator)
        return self

    async def __call__(self, request: Any, next_: Next) -> Any:
        applicable = [v for v in self._validators if v.applies_to(request)]
        if applicable:
            results = await asyncio.gather(*(v.validate(request) for v in applicable))
            violations: list[RuleViolation] = [violation for result in results for violation in result]
            if violations:
                name = type(request).__name__
                self._log.info("request.validation_failed", request=name, violations=len(violations))
                raise RequestValidationError(name, violations)
        return await next_()


class CachingBehavior(PipelineBehavior[Any, Any]):
    """Cache query results by request content; commands pass straight through.

    Each instance owns its store unless one is passed in.  Concurrent misses
    for the same key are serialised so the handler runs once per key per
    TTL window.  Store failures surface as :class:`CacheBackendError`.
    """

    def __init__(
        self,
        store: CacheStore | None = None,
        ttl_seconds: float = 60.0,
        *,
        ttl_map: dict[type, float] | None = None,
        clock: Clock | None = None,
        log: Any = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds!r}")
        self._store: CacheStore = store if store is not None else InMemoryCacheStore(clock)
        self._ttl = ttl_seconds
        self._ttl_map: dict[type, float] = ttl_map or {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}
        self._log = log if log is not None else logger

    async def __call__(self, request: Any, next_: Next) -> Any:
        if not isinstance(request, Query):
            return await next_()

        key = CacheKey.for_request(request)
        entry = await self._get(key)
        if entry is not None:
            self._log.debug("cache.hit", request=type(request).__name__)
            return entry.value

        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                # Double-check after acquiring lock
                entry = await self._get(key)
                if entry is not None:
                    return entry.value
                self._log.debug("cache.miss", request=type(request).__name__)
                result = await next_()
                await self._set(key, result, self._ttl_map.get(type(request), self._ttl))
                return result
        finally:
            self._release(key)

    def _release(self, key: str) -> None:
        # Locks live only while a caller holds or awaits them.
        self._waiters[key] -= 1
        if not self._waiters[key]:
            del self._waiters[key]
            del self._locks[key]

    async def _get(self, key: str) -> CacheEntry | None:
        try:
            return await self._store.get(key)
        except BaseError:
            raise
        except Exception as exc:
            raise CacheBackendError(f"Cache read failed for {key!r}", behavior=self.name, cause=exc) from exc

    async def _set(self, key: str, value: Any, ttl: float) -> None:
        try:
            await self._store.set(key, value, ttl)
        except BaseError:
            raise
        except Exception as exc:
            raise CacheBackendError(f"Cache write failed for {key!r}", behavior=self.name, cause=exc) from exc


class TimeoutBehavior(PipelineBehavior[Any, Any]):
    """Fail with :class:`DispatchTimeoutError` if downstream exceeds *timeout_seconds*."""

    def __init__(self, timeout_seconds: float) -> None:
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds!r}")
        self._timeout = timeout_seconds

    async def __call__(self, request: Any, next_: Next) -> Any:
        deadline = asyncio.timeout(self._timeout)
        try:
            async with deadline:
                return await next_()
        except TimeoutError as exc:
            if not deadline.expired():
                raise
            raise DispatchTimeoutError(
                f"{type(request).__name__} timed out after {self._timeout}s",
                detail={"request_type": type(request).__name__, "timeout_seconds": self._timeout},
            ) from exc


__all__ = [
    "CachingBehavior",
    "ExceptionLoggingBehavior",
    "TimeoutBehavior",
    "TimingBehavior",
    "ValidationBehavior",
]
