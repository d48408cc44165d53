"""
``prometheus_client`` collector backed by the translators.

[MeasurementCollector][atlas_exporter.services.collector.MeasurementCollector]
implements the custom collector protocol (``describe()`` / ``collect()``).
It stores the latest result per probe for every registered measurement and,
on each scrape, runs the matching translator over them and groups the
samples into one ``GaugeMetricFamily`` per metric name.

Note:
    Several measurements of the same type share metric names and are told
    apart by the ``measurement`` label, so a single collector serves all of
    them and ``describe()`` yields each metric name once.

    ``update()`` swaps an immutable tuple of ``(result, probe)`` pairs in one
    assignment, so a scrape running concurrently sees either the previous
    or the new snapshot, never a mix.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from prometheus_client import Counter
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from atlas_exporter.core.logger import Logger
from atlas_exporter.models import MeasurementResult, MetricDescriptor, Probe
from atlas_exporter.translators import BaseTranslator


@dataclass(slots=True)
class _Measurement:
    translator: BaseTranslator
    entries: tuple[tuple[MeasurementResult, Probe], ...] = field(default=())


def _family(descriptor: MetricDescriptor) -> GaugeMetricFamily:
    return GaugeMetricFamily(
        descriptor.name, descriptor.documentation, labels=list(descriptor.label_names)
    )


class MeasurementCollector(Collector):
    """Serves the samples of every registered measurement on each scrape.

    Translators are registered once at start-up with
    [add_translator()][atlas_exporter.services.collector.MeasurementCollector.add_translator];
    results are replaced wholesale with
    [update()][atlas_exporter.services.collector.MeasurementCollector.update].

    Args:
        errors: Optional counter (label ``measurement``) incremented when a
            translator raises unexpectedly during a scrape.
        logger: Structured logger; defaults to ``Logger("collector")``.
    """

    def __init__(self, *, errors: Counter | None = None, logger: Logger | None = None) -> None:
        self._measurements: dict[str, _Measurement] = {}
        self._errors = errors
        self._logger = logger or Logger("collector")

    @property
    def measurement_ids(self) -> tuple[str, ...]:
        return tuple(self._measurements)

    def add_translator(self, translator: BaseTranslator) -> None:
        """Register the translator for one measurement.

        Raises:
            ValueError: If a translator is already registered for the same
                measurement id.
        """
        if translator.measurement_id in self._measurements:
            raise ValueError(f"measurement {translator.measurement_id} already registered")
        self._measurements[translator.measurement_id] = _Measurement(translator)

    def update(
        self,
        measurement_id: str,
        results: Iterable[MeasurementResult],
        probes: Mapping[int, Probe],
    ) -> int:
        """Replace the stored results of one measurement.

        Only the newest result (by ``timestamp``) of each probe is kept.
        Results from probes missing in *probes* are skipped.

        Returns:
            Number of ``(result, probe)`` pairs now stored.

        Raises:
            KeyError: If no translator is registered for *measurement_id*.
        """
        measurement = self._measurements[measurement_id]

        latest: dict[int, MeasurementResult] = {}
        for result in results:
            current = latest.get(result.prb_id)
            if current is None or result.timestamp >= current.timestamp:
                latest[result.prb_id] = result

        entries: list[tuple[MeasurementResult, Probe]] = []
        for prb_id, result in latest.items():
            probe = probes.get(prb_id)
            if probe is None:
                self._logger.warning("probe_unknown", measurement=measurement_id, probe=prb_id)
                continue
            entries.append((result, probe))

        measurement.entries = tuple(entries)
        return len(entries)

    def describe(self) -> Iterator[GaugeMetricFamily]:
        """Yield one empty family per distinct metric name, without touching results."""
        seen: set[str] = set()
        for measurement in self._measurements.values():
            for descriptor in measurement.translator.describe():
                if descriptor.name not in seen:
                    seen.add(descriptor.name)
                    yield _family(descriptor)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        """Translate every stored result and yield the populated families."""
        families: dict[str, GaugeMetricFamily] = {}
        for measurement in self._measurements.values():
            translator = measurement.translator
            for descriptor in translator.describe():
                if descriptor.name not in families:
                    families[descriptor.name] = _family(descriptor)

            for result, probe in measurement.entries:
                try:
                    samples = list(translator.export(result, probe))
                except Exception as e:  # Intentionally broad: per-result scrape error boundary
                    self._logger.error(
                        "export_failed",
                        measurement=translator.measurement_id,
                        probe=probe.id,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    if self._errors is not None:
                        self._errors.labels(measurement=translator.measurement_id).inc()
                    continue
                for sample in samples:
                    families[sample.name].add_metric(list(sample.label_values), sample.value)

        yield from families.values()
