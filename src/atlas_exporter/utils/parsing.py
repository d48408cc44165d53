"""Tolerant parsing helpers.

Provides the fallback pipeline used by the translators
([first_of][atlas_exporter.utils.parsing.first_of]), lenient numeric
parsing ([parse_float][atlas_exporter.utils.parsing.parse_float]) and a
factory-based converter that turns raw documents into model instances,
skipping the ones that fail validation.

The module depends only on the standard library, keeping it safe to
import from any layer above ``models``.

Examples:
    ```python
    from atlas_exporter.models import MeasurementResult
    from atlas_exporter.utils.parsing import first_of, models_from_dict

    results = models_from_dict(documents, MeasurementResult.from_dict)
    der = first_of((decode_pem, decode_base64_der), blob)
    ```
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, TypeVar


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

logger = logging.getLogger(__name__)

_A = TypeVar("_A")
_T = TypeVar("_T")


def first_of(
    strategies: Iterable[Callable[[_A], _T | None]],
    value: _A,
    default: _T | None = None,
) -> _T | None:
    """Apply *strategies* to *value* in order and return the first non-``None`` result.

    Each strategy must signal failure by returning ``None`` rather than
    raising. When every strategy fails, *default* is returned.
    """
    for strategy in strategies:
        result = strategy(value)
        if result is not None:
            return result
    return default


def parse_float(value: Any, default: float = 0.0) -> float:
    """Parse *value* as a finite float, returning *default* on any failure.

    Strings are stripped before parsing. ``nan`` and infinities count as
    failures so they never reach an exposed gauge.
    """
    if isinstance(value, bool):
        return default
    try:
        result = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def models_from_dict(
    rows: Sequence[Any],
    factory: Callable[[Any], _T],
) -> list[_T]:
    """Parse raw documents into model instances, skipping invalid entries.

    Calls ``factory(row)`` for each document.  Items that raise
    ``ValueError`` or ``TypeError`` are logged and discarded.
    """
    results: list[_T] = []
    for row in rows:
        try:
            results.append(factory(row))
        except (ValueError, TypeError) as e:
            logger.warning("parse_failed error=%s", str(e))
    return results


__all__ = [
    "first_of",
    "models_from_dict",
    "parse_float",
]
