"""Pure frozen dataclasses with zero I/O for measurement results and samples.

The models layer is the foundation of the package. It has **no dependencies**
on any other atlas_exporter package -- only the Python standard library.
Every model uses ``@dataclass(frozen=True, slots=True)`` and validates in
``__post_init__`` so invalid instances never escape the constructor.

Attributes:
    MeasurementResult: One RIPE Atlas result document (sslcert or dns,
        single or multi target).
    DnsResultset: One resolver's outcome inside a multi-target DNS result.
    DnsResponse: Round-trip time and raw answer buffer of a DNS query.
    SslAlert: TLS alert level and description codes.
    Probe: Vantage point metadata (id, ASN per family, country, coordinates).
    MetricDescriptor: Fully-qualified name, help and label schema of a gauge.
    Sample: One labeled value emitted for a descriptor.

See Also:
    [atlas_exporter.translators][]: Turns these models into samples.
"""

from .constants import UNKNOWN_ISSUER, AddressFamily, MeasurementType, RecordType
from .probe import Probe
from .result import DnsResponse, DnsResultset, MeasurementResult, SslAlert
from .sample import MetricDescriptor, Sample


__all__ = [
    "UNKNOWN_ISSUER",
    "AddressFamily",
    "DnsResponse",
    "DnsResultset",
    "MeasurementResult",
    "MeasurementType",
    "MetricDescriptor",
    "Probe",
    "RecordType",
    "Sample",
    "SslAlert",
]
