"""
Exporter service: loads stored results and serves them as Prometheus metrics.

The exporter wires the pieces together:

1. One descriptor table per measurement type is built at start-up and
   shared by every translator of that type.
2. A translator is created per configured measurement and registered in
   a single [MeasurementCollector][atlas_exporter.services.collector.MeasurementCollector].
3. Probe metadata and results are read from JSON files (RIPE Atlas API
   document shapes) and handed to the collector.
4. The collector's registry is rendered on demand (``render()``) or served
   over HTTP by [MetricsServer][atlas_exporter.core.metrics.MetricsServer].

Fetching results from the Atlas API is left to an external job that
writes the JSON files; ``load()`` can be called again to pick up new data.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Self

from prometheus_client import CollectorRegistry, Counter, generate_latest

from atlas_exporter.core.exceptions import ResultError
from atlas_exporter.core.logger import Logger
from atlas_exporter.core.metrics import MetricsServer
from atlas_exporter.models import MeasurementResult, Probe
from atlas_exporter.models.constants import MeasurementType
from atlas_exporter.translators import TRANSLATOR_REGISTRY, DescriptorTable
from atlas_exporter.utils.parsing import models_from_dict

from .collector import MeasurementCollector
from .configs import ExporterConfig, load_config


def load_json_documents(path: Path) -> list[Any]:
    """Read a JSON file holding a list of documents.

    Accepts either a bare JSON list or an API page of the form
    ``{"results": [...]}``.

    Raises:
        ResultError: If the file cannot be read, is not valid JSON, or has
            another top-level shape.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResultError(f"cannot read {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("results"), list):
        data = data["results"]
    if not isinstance(data, list):
        raise ResultError(f"{path} must contain a JSON list, got {type(data).__name__}")
    return data


def load_probes(path: Path) -> dict[int, Probe]:
    """Load probe metadata keyed by probe id, skipping invalid documents."""
    probes = models_from_dict(load_json_documents(path), Probe.from_dict)
    return {probe.id: probe for probe in probes}


def load_results(path: Path) -> list[MeasurementResult]:
    """Load measurement results, skipping invalid documents."""
    return models_from_dict(load_json_documents(path), MeasurementResult.from_dict)


class Exporter:
    """Serves the configured measurements as Prometheus metrics.

    Each instance owns a private ``CollectorRegistry`` so several exporters
    (e.g. in tests) never collide on metric names.

    Examples:
        ```python
        exporter = Exporter.from_yaml("config/exporter.yaml")
        exporter.load()
        print(exporter.render().decode())
        ```
    """

    def __init__(self, config: ExporterConfig, registry: CollectorRegistry | None = None) -> None:
        self._config = config
        self._registry = registry if registry is not None else CollectorRegistry()
        self._logger = Logger("exporter", json_output=config.json_logs)

        self._errors = Counter(
            "atlas_exporter_export_errors",
            "Results whose translation raised unexpectedly",
            ["measurement"],
            registry=self._registry,
        )
        self._collector = MeasurementCollector(
            errors=self._errors,
            logger=Logger("collector", json_output=config.json_logs),
        )

        tables: dict[MeasurementType, DescriptorTable] = {}
        for source in config.measurements:
            translator_cls = TRANSLATOR_REGISTRY[source.type]
            if source.type not in tables:
                tables[source.type] = translator_cls.build_descriptors(config.namespace)
            self._collector.add_translator(translator_cls(source.id, tables[source.type]))

        self._registry.register(self._collector)

    @classmethod
    def from_yaml(cls, config_path: str | Path, registry: CollectorRegistry | None = None) -> Self:
        """Create an exporter from a YAML configuration file.

        Raises:
            ConfigurationError: If the file is missing or invalid.
        """
        return cls(load_config(config_path), registry)

    @property
    def config(self) -> ExporterConfig:
        return self._config

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    @property
    def collector(self) -> MeasurementCollector:
        return self._collector

    def load(self) -> int:
        """(Re)load probes and results for every configured measurement.

        Results whose ``type`` does not match the configured measurement
        type are skipped.

        Returns:
            Total number of ``(result, probe)`` pairs stored.

        Raises:
            ResultError: If a probe or result file cannot be read.
        """
        probes = load_probes(self._config.probes_path)
        self._logger.info("probes_loaded", count=len(probes), path=str(self._config.probes_path))

        total = 0
        for source in self._config.measurements:
            results = []
            for result in load_results(source.results_path):
                if result.type and result.type != source.type:
                    self._logger.warning(
                        "result_type_mismatch",
                        measurement=source.id,
                        expected=source.type.value,
                        got=result.type,
                    )
                    continue
                results.append(result)
            stored = self._collector.update(source.id, results, probes)
            self._logger.info(
                "results_loaded",
                measurement=source.id,
                type=source.type.value,
                read=len(results),
                stored=stored,
            )
            total += stored
        return total

    def render(self) -> bytes:
        """Render the registry in Prometheus text exposition format."""
        return generate_latest(self._registry)

    async def serve(self, shutdown: asyncio.Event) -> None:
        """Serve the registry on the configured endpoint until *shutdown* is set.

        Raises:
            OSError: If the endpoint address cannot be bound.
        """
        async with MetricsServer(self._config.metrics, self._registry) as server:
            self._logger.info("metrics_server_started", url=server.url)
            await shutdown.wait()
        self._logger.info("metrics_server_stopped")
