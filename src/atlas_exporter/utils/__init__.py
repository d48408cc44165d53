"""Tolerant parsing helpers shared by the translators and services.

The utils layer depends only on the standard library. It provides the
ordered-fallback pipeline used by certificate decoding, lenient float
parsing for protocol version strings, and a skip-invalid converter for
raw result documents.

Note:
    The utils layer has **zero** imports from ``atlas_exporter.core`` or
    ``atlas_exporter.services``.

Examples:
    ```python
    from atlas_exporter.utils import first_of, parse_float
    ```
"""

from .parsing import first_of, models_from_dict, parse_float


__all__ = [
    "first_of",
    "models_from_dict",
    "parse_float",
]
