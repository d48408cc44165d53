"""Field checks for the frozen models.

``validate_*`` helpers raise and guard ``__post_init__``. ``get_*`` readers
never raise: Atlas documents are loosely typed, so ``from_dict``
constructors fall back to a default for any field of the wrong type.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _type_name(value: Any) -> str:
    return type(value).__name__


def validate_int(value: Any, name: str) -> None:
    if not _is_int(value):
        raise TypeError(f"{name} must be an int, got {_type_name(value)}")


def validate_number(value: Any, name: str) -> None:
    """Require a finite int or float. ``bool`` is rejected."""
    if not (_is_int(value) or isinstance(value, float)):
        raise TypeError(f"{name} must be a number, got {_type_name(value)}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


def validate_str_no_null(value: Any, name: str) -> None:
    """Require a ``str`` without NUL characters, which label values cannot carry."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {_type_name(value)}")
    if "\x00" in value:
        raise ValueError(f"{name} contains null bytes")


def validate_mapping(value: Any, name: str) -> None:
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be a Mapping, got {_type_name(value)}")


def get_int(raw: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = raw.get(key)
    return value if _is_int(value) else default


def get_float(raw: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    """Read *key* as a float. Non-numeric and non-finite values give *default*."""
    value = raw.get(key)
    if _is_int(value) or isinstance(value, float):
        number = float(value)
        if math.isfinite(number):
            return number
    return default


def get_str(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key)
    if isinstance(value, str) and "\x00" not in value:
        return value
    return default
