"""Application cache – CacheKey builder."""
from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import hashlib
import json
import pathlib
import uuid
from collections.abc import Mapping
from typing import Any

__all__ = ["CacheKey"]

# Types whose str() is value-based and stable.
_VALUE_TYPES = (
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    decimal.Decimal,
    uuid.UUID,
    pathlib.PurePath,
    complex,
)


def _canonical(value: Any) -> Any:
    """Reduce *value* to JSON-encodable primitives, structurally."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, enum.Enum):
        return {"__enum__": f"{type(value).__qualname__}.{value.name}"}
    if isinstance(value, bytes):
        return {"__bytes__": value.hex()}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            "__type__": type(value).__qualname__,
            "fields": {f.name: _canonical(getattr(value, f.name)) for f in dataclasses.fields(value)},
        }
    if isinstance(value, Mapping):
        return {"__map__": sorted(([_canonical(k), _canonical(v)] for k, v in value.items()), key=repr)}
    if isinstance(value, (set, frozenset)):
        return {"__set__": sorted((_canonical(v) for v in value), key=repr)}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    if isinstance(value, _VALUE_TYPES):
        return {"__str__": f"{type(value).__qualname__}:{value}"}
    if hasattr(value, "__dict__"):
        return {"__type__": type(value).__qualname__, "fields": _canonical(vars(value))}
    slots = _slot_names(type(value))
    if slots is not None:
        return {
            "__type__": type(value).__qualname__,
            "fields": {name: _canonical(getattr(value, name, None)) for name in slots},
        }
    raise TypeError(f"Cannot derive a cache key from {type(value).__qualname__!r} value")


def _slot_names(cls: type) -> list[str] | None:
    """Sorted ``__slots__`` across the MRO, or ``None`` if no class declares any."""
    declared = [klass.__dict__["__slots__"] for klass in cls.__mro__ if "__slots__" in klass.__dict__]
    if not declared:
        return None
    names: set[str] = set()
    for slots in declared:
        names.update([slots] if isinstance(slots, str) else slots)
    return sorted(names - {"__dict__", "__weakref__"})


class CacheKey:
    """Factory for deterministic cache key strings."""

    @staticmethod
    def for_request(request: Any) -> str:
        """Content-derived key: equal request values share a key.

        The request is serialised structurally (dataclass fields, mappings,
        sequences, ``__dict__`` or ``__slots__``), JSON-encoded with sorted keys
        and hashed with SHA-256.  Object identity and ``hash()`` are never
        used; a value with no structural or value-based form raises
        :class:`TypeError`.
        """
        request_type = type(request)
        canonical = json.dumps(_canonical(request), sort_keys=True, separators=(",", ":"))
        digest = hashlib.sha256(canonical.encode()).hexdigest()
        return f"query:{request_type.__module__}.{request_type.__qualname__}:{digest}"
