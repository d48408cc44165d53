"""Exporter service: configuration, Prometheus collector and HTTP serving.

Attributes:
    Exporter: Loads result and probe files and serves them through a
        private ``CollectorRegistry``.
    MeasurementCollector: ``prometheus_client`` custom collector running
        the translators on each scrape.
    ExporterConfig: Pydantic configuration model loaded from YAML.
"""

from .collector import MeasurementCollector
from .configs import ExporterConfig, MeasurementSource, load_config
from .exporter import Exporter, load_json_documents, load_probes, load_results


__all__ = [
    "Exporter",
    "ExporterConfig",
    "MeasurementCollector",
    "MeasurementSource",
    "load_config",
    "load_json_documents",
    "load_probes",
    "load_results",
]
