"""Value Helpers

Sentinels and small value utilities shared by the parse engine:
- UNDEFINED: the "absent" marker, distinct from None
- Symbol: unique identity marker values
- clone_deep: defensive copy of container data
- literalize / format_path: display helpers for messages and hints
"""
from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Final, Mapping, Sequence


class _Undefined:
    """Marker for an absent value (missing key, missing position)."""
    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __repr__(self) -> str: return "UNDEFINED"
    def __bool__(self) -> bool: return False
    def __copy__(self) -> _Undefined: return self
    def __deepcopy__(self, memo: dict) -> _Undefined: return self
    def __reduce__(self) -> str: return "UNDEFINED"


UNDEFINED: Final = _Undefined()


class Symbol:
    """Unique identity value, equal only to itself."""
    __slots__ = ("description",)

    def __init__(self, description: str | None = None):
        self.description = description

    def __repr__(self) -> str:
        return f"Symbol({self.description!r})" if self.description is not None else "Symbol()"


PRIMITIVE_TYPES: Final = (str, int, float, bool, bytes, type(None), _Undefined, Symbol)


def is_primitive(value: Any) -> bool:
    return isinstance(value, PRIMITIVE_TYPES)


def same_value(a: Any, b: Any) -> bool:
    """Strict equality: identical objects, or same concrete type and equal."""
    return a is b or (type(a) is type(b) and a == b)


def clone_deep(value: Any) -> Any:
    """Copy containers recursively; leave every other object as-is."""
    if isinstance(value, dict):
        return {k: clone_deep(v) for k, v in value.items()}
    if isinstance(value, list):
        return [clone_deep(v) for v in value]
    if isinstance(value, tuple):
        return tuple(clone_deep(v) for v in value)
    if isinstance(value, set):
        return {clone_deep(v) for v in value}
    return value


def literalize(value: Any) -> str:
    """Render a value the way it appears in messages and hints."""
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, Mapping):
        return "{" + ", ".join(f"{literalize(k)}: {literalize(v)}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(literalize(v) for v in value) + "]"
    return repr(value)


def format_path(path: Sequence[str | int]) -> str:
    """Format a path as a JSON path: ``user.addresses[0].street``, ``$`` at root."""
    if not path: return "$"
    parts = []
    for segment in path:
        if isinstance(segment, int): parts.append(f"[{segment}]")
        elif parts: parts.append(f".{segment}")
        else: parts.append(str(segment))
    return "".join(parts)
