"""Reading the exporter's YAML configuration file.

Only ``yaml.safe_load`` is used, so tags that construct Python objects are
rejected. The mapping returned here is validated afterwards by
[ExporterConfig][atlas_exporter.services.configs.ExporterConfig].
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Return the top-level mapping of the YAML document at *config_path*.

    An empty document yields ``{}``.

    Raises:
        FileNotFoundError: No file at *config_path*.
        yaml.YAMLError: The document does not parse.
        TypeError: The document is a scalar or a list.
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TypeError(f"Config file must contain a mapping, got {type(data).__name__}")
    return data
