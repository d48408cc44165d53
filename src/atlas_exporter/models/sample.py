"""
Metric descriptors and the samples emitted against them.

A [MetricDescriptor][atlas_exporter.models.sample.MetricDescriptor] fixes a
metric's fully-qualified name, help text and ordered label schema. A
[Sample][atlas_exporter.models.sample.Sample] is one value for one
descriptor with label values in exactly that order. Construction rejects a
label tuple of the wrong length and any label value that is not a
null-free ``str``, so a malformed sample fails inside the translator that
built it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ._validation import validate_str_no_null


@dataclass(frozen=True, slots=True)
class MetricDescriptor:
    """Static description of one gauge metric.

    Attributes:
        name: Fully-qualified metric name (``<namespace>_<subsystem>_<metric>``).
        documentation: Help text shown in the exposition format.
        label_names: Ordered label schema every sample must follow.
    """

    name: str
    documentation: str
    label_names: tuple[str, ...]

    def __post_init__(self) -> None:
        validate_str_no_null(self.name, "name")
        if not self.name:
            raise ValueError("name must not be empty")
        if len(set(self.label_names)) != len(self.label_names):
            raise ValueError(f"duplicate label names in {self.name}")


@dataclass(frozen=True, slots=True)
class Sample:
    """One gauge value emitted for a descriptor.

    Raises:
        ValueError: If ``label_values`` does not match the descriptor's schema
            length, or a value contains null bytes.
        TypeError: If a label value is not a ``str``.
    """

    descriptor: MetricDescriptor
    value: float
    label_values: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.label_values) != len(self.descriptor.label_names):
            raise ValueError(
                f"{self.descriptor.name} expects {len(self.descriptor.label_names)} labels, "
                f"got {len(self.label_values)}"
            )
        for label, value in zip(self.descriptor.label_names, self.label_values, strict=True):
            validate_str_no_null(value, f"{self.descriptor.name} label {label}")

    @property
    def name(self) -> str:
        """Name of the metric this sample belongs to."""
        return self.descriptor.name

    @property
    def labels(self) -> dict[str, str]:
        """Label values keyed by label name."""
        return dict(zip(self.descriptor.label_names, self.label_values, strict=True))
