"""Infrastructure shared by the exporter service.

Depends on no other atlas_exporter package and is depended upon by
``atlas_exporter.services``.

Attributes:
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][atlas_exporter.core.logger.Logger].
    MetricsServer: aiohttp ``/metrics`` endpoint rendering a
        ``prometheus_client`` registry.
        See [MetricsServer][atlas_exporter.core.metrics.MetricsServer].
    load_yaml: Safe YAML loading with ``yaml.safe_load()``.
    AtlasExporterError: Root of the exception hierarchy.
"""

from .exceptions import AtlasExporterError, ConfigurationError, ResultError
from .logger import Logger, StructuredFormatter, format_kv_pairs, setup_logging
from .metrics import MetricsConfig, MetricsServer
from .yaml import load_yaml


__all__ = [
    "AtlasExporterError",
    "ConfigurationError",
    "Logger",
    "MetricsConfig",
    "MetricsServer",
    "ResultError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
    "setup_logging",
]
