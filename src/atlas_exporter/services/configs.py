"""Exporter configuration models.

See Also:
    [Exporter][atlas_exporter.services.exporter.Exporter]: The service
        that consumes these configurations.
    [MetricsConfig][atlas_exporter.core.metrics.MetricsConfig]: Embedded
        configuration for the Prometheus endpoint.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Self

import yaml
from pydantic import BaseModel, BeforeValidator, Field, ValidationError, model_validator

from atlas_exporter.core.exceptions import ConfigurationError
from atlas_exporter.core.metrics import MetricsConfig
from atlas_exporter.core.yaml import load_yaml
from atlas_exporter.models.constants import MeasurementType


def _id_as_str(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


MeasurementId = Annotated[str, BeforeValidator(_id_as_str), Field(min_length=1)]


class MeasurementSource(BaseModel):
    """One measurement whose stored results are exported.

    ``id`` is written verbatim into the ``measurement`` label; YAML
    integers are accepted and converted.
    """

    id: MeasurementId
    type: MeasurementType
    results_path: Path


class ExporterConfig(BaseModel):
    """Top-level exporter configuration.

    Example YAML:

    ```yaml
    namespace: atlas
    probes_path: data/probes.json
    measurements:
      - id: 1001
        type: sslcert
        results_path: data/1001.json
      - id: 2002
        type: dns
        results_path: data/2002.json
    metrics:
      host: 0.0.0.0
      port: 9400
    ```
    """

    namespace: str = Field(
        default="atlas",
        pattern=r"^[a-zA-Z_][a-zA-Z0-9_]*$",
        description="Metric name prefix",
    )
    probes_path: Path
    measurements: list[MeasurementSource] = Field(min_length=1)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    @model_validator(mode="after")
    def validate_unique_ids(self) -> Self:
        """Reject configurations listing the same measurement twice."""
        ids = [m.id for m in self.measurements]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate measurement ids: {', '.join(duplicates)}")
        return self

    def resolve_paths(self, base: Path) -> Self:
        """Return a copy with relative data paths anchored at *base*."""

        def anchor(path: Path) -> Path:
            return path if path.is_absolute() else base / path

        return self.model_copy(
            update={
                "probes_path": anchor(self.probes_path),
                "measurements": [
                    m.model_copy(update={"results_path": anchor(m.results_path)})
                    for m in self.measurements
                ],
            }
        )


def load_config(config_path: str | Path) -> ExporterConfig:
    """Load and validate an exporter configuration file.

    Relative data paths are resolved against the directory containing the
    configuration file.

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, or
            does not match the ``ExporterConfig`` schema.
    """
    path = Path(config_path)
    try:
        raw = load_yaml(path)
        config = ExporterConfig.model_validate(raw)
    except (FileNotFoundError, TypeError, yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(f"invalid config {path}: {e}") from e
    return config.resolve_paths(path.parent)
