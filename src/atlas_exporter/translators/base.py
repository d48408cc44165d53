"""
Shared base classes for the result-to-metric translators.

Provides the pieces both translators are built from:

    [MetricSpec][atlas_exporter.translators.base.MetricSpec]
        Short name, help text and label schema of one metric, declared
        as a class constant by each translator.
    [DescriptorTable][atlas_exporter.translators.base.DescriptorTable]
        Immutable mapping from short name to fully-qualified
        [MetricDescriptor][atlas_exporter.models.sample.MetricDescriptor],
        built once at startup and injected into a translator.
    [BaseTranslator][atlas_exporter.translators.base.BaseTranslator]
        Abstract translator with the ``export()`` / ``describe()``
        contract and the reachability policy both translators share.

Note:
    Translators hold no mutable state. ``export()`` only reads its
    arguments and the injected descriptor table, so any number of calls
    may run concurrently without locking.

See Also:
    [atlas_exporter.translators.sslcert][]: Certificate probe translator.
    [atlas_exporter.translators.dns][]: DNS probe translator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import ClassVar, Self

from atlas_exporter.models import MeasurementResult, MetricDescriptor, Probe, Sample
from atlas_exporter.models.constants import MeasurementType


DEFAULT_NAMESPACE = "atlas"

TARGET_LABELS: tuple[str, ...] = (
    "measurement",
    "probe",
    "dst_addr",
    "asn",
    "ip_version",
    "country_code",
    "lat",
    "long",
)
"""Label schema identifying one probe-to-target round trip."""


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty parts with underscores, like ``prometheus.BuildFQName``."""
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True, slots=True)
class MetricSpec:
    """Declaration of one metric before namespacing."""

    name: str
    documentation: str
    label_names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DescriptorTable:
    """Read-only table of metric descriptors keyed by short name.

    Built once per translator at startup via
    [build()][atlas_exporter.translators.base.DescriptorTable.build] and
    safe to share between threads. Iteration yields descriptors in
    declaration order.
    """

    descriptors: Mapping[str, MetricDescriptor]

    @classmethod
    def build(cls, specs: tuple[MetricSpec, ...], namespace: str, subsystem: str) -> Self:
        """Namespace every spec as ``<namespace>_<subsystem>_<name>``."""
        return cls(
            descriptors=MappingProxyType(
                {
                    spec.name: MetricDescriptor(
                        name=build_fq_name(namespace, subsystem, spec.name),
                        documentation=spec.documentation,
                        label_names=spec.label_names,
                    )
                    for spec in specs
                }
            )
        )

    def __getitem__(self, name: str) -> MetricDescriptor:
        return self.descriptors[name]

    def __iter__(self) -> Iterator[MetricDescriptor]:
        return iter(self.descriptors.values())

    def __len__(self) -> int:
        return len(self.descriptors)


class BaseTranslator(ABC):
    """Abstract base class for measurement result translators.

    Subclasses set ``MEASUREMENT_TYPE`` (also used as the metric
    subsystem), declare their metrics in ``METRICS`` and implement
    [export()][atlas_exporter.translators.base.BaseTranslator.export].

    Every subclass declares ``success`` and ``rtt`` metrics; the shared
    [_reachability()][atlas_exporter.translators.base.BaseTranslator._reachability]
    policy emits them.

    Attributes:
        measurement_id: Measurement identifier written into every sample.
        descriptors: Injected descriptor table.

    Raises:
        ValueError: If the injected table lacks a metric declared in ``METRICS``.
    """

    MEASUREMENT_TYPE: ClassVar[MeasurementType]
    METRICS: ClassVar[tuple[MetricSpec, ...]]

    def __init__(self, measurement_id: str, descriptors: DescriptorTable) -> None:
        missing = [spec.name for spec in self.METRICS if spec.name not in descriptors.descriptors]
        if missing:
            raise ValueError(f"descriptor table is missing metrics: {', '.join(missing)}")
        self._measurement_id = measurement_id
        self._descriptors = descriptors

    @classmethod
    def build_descriptors(cls, namespace: str = DEFAULT_NAMESPACE) -> DescriptorTable:
        """Build this translator's descriptor table under *namespace*."""
        return DescriptorTable.build(cls.METRICS, namespace, cls.MEASUREMENT_TYPE.value)

    @classmethod
    def create(cls, measurement_id: str, namespace: str = DEFAULT_NAMESPACE) -> Self:
        """Convenience factory building the descriptor table and the translator."""
        return cls(measurement_id, cls.build_descriptors(namespace))

    @property
    def measurement_id(self) -> str:
        return self._measurement_id

    @property
    def descriptors(self) -> DescriptorTable:
        return self._descriptors

    def describe(self) -> tuple[MetricDescriptor, ...]:
        """Return the static descriptors, independent of any result."""
        return tuple(self._descriptors)

    @abstractmethod
    def export(self, result: MeasurementResult, probe: Probe) -> Iterator[Sample]:
        """Translate one result into samples. Never raises for malformed optional fields."""
        ...

    def _target_labels(self, probe: Probe, dst_addr: str, af: int) -> tuple[str, ...]:
        """Label values for ``TARGET_LABELS``, in schema order."""
        return (
            self._measurement_id,
            str(probe.id),
            dst_addr,
            str(probe.asn_for_ip_version(af)),
            str(af),
            probe.country_code,
            probe.lat,
            probe.long,
        )

    def _reachability(self, rtt: float, label_values: tuple[str, ...]) -> Iterator[Sample]:
        """Emit ``success=1`` plus ``rtt`` when *rtt* > 0, else ``success=0`` alone."""
        if rtt > 0:
            yield Sample(self._descriptors["success"], 1, label_values)
            yield Sample(self._descriptors["rtt"], rtt, label_values)
        else:
            yield Sample(self._descriptors["success"], 0, label_values)
