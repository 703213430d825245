# questrunner/infra/serialization.py
from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from types import UnionType
from typing import Any, Union, cast, get_args, get_origin, get_type_hints
from typing import Iterable as TypingIterable

# ---------- Decoding (JSON -> Python/dataclasses) ----------


def from_document(cls: type, doc: Any) -> Any:
    """
    Reconstruct a dataclass instance of type `cls` from a plain dict `doc`.
    Ignores keys the dataclass does not declare.
    """
    if doc is None:
        return None

    if is_dataclass(cls):
        if not isinstance(doc, dict):
            raise TypeError(f"Expected an object for {cls.__name__}, got {type(doc).__name__}")
        kwargs = {}
        type_hints = get_type_hints(cls)
        for f in fields(cls):
            if f.name not in doc:
                continue
            expected_type = type_hints.get(f.name, f.type)
            kwargs[f.name] = _from_document_value(expected_type, doc[f.name])
        return cls(**kwargs)

    return _from_document_value(cls, doc)


def _from_document_value(expected_type: Any, value: Any) -> Any:
    if value is None:
        return None

    # Handle typing.Optional[...] / Union[..., None]
    origin = get_origin(expected_type)
    args = get_args(expected_type)
    if origin in (Union, UnionType):
        # pick the first non-None type
        inner = next((a for a in args if a is not type(None)), Any)
        return _from_document_value(inner, value)

    # Handle collections like list[T], set[T], tuple[T, ...]
    if origin in (list, set, frozenset, tuple):
        inner = args[0] if args else Any
        raw_iter: TypingIterable[Any] = cast(TypingIterable[Any], value or [])
        seq = [_from_document_value(inner, v) for v in raw_iter]
        if origin is list:
            return list(seq)
        if origin is set:
            return set(seq)
        if origin is frozenset:
            return frozenset(seq)
        return tuple(seq)

    # Recurse into nested dataclasses
    if isinstance(expected_type, type) and is_dataclass(expected_type):
        return from_document(expected_type, value)

    # Enums: reconstruct from their value, falling back to the member name
    if isinstance(expected_type, type) and issubclass_safe(expected_type, Enum):
        try:
            return expected_type(value)
        except ValueError:
            if isinstance(value, str) and value.upper() in expected_type.__members__:
                return expected_type.__members__[value.upper()]
            raise

    # Datetime: ISO strings or seconds since epoch, always UTC-aware
    if expected_type is datetime:
        if isinstance(value, datetime):
            return (
                value.replace(tzinfo=timezone.utc)
                if value.tzinfo is None
                else value.astimezone(timezone.utc)
            )
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if isinstance(value, str):
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return (
                parsed.replace(tzinfo=timezone.utc)
                if parsed.tzinfo is None
                else parsed.astimezone(timezone.utc)
            )

    if expected_type is int and isinstance(value, str):
        # hero ids and token amounts are often serialised as strings
        return int(value, 0)

    # Primitive or already-correct type
    return value


def issubclass_safe(t: Any, base: type) -> bool:
    try:
        return issubclass(t, base)
    except Exception:
        return False
