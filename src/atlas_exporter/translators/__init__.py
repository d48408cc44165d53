"""Result-to-metric translators for RIPE Atlas measurements.

Each translator is a stateless function of ``(result, probe)`` to a
sequence of labeled gauge samples, plus a static ``describe()`` of the
metrics it can emit. The descriptor table is built once and injected at
construction.

```text
BaseTranslator                       export() / describe() contract
+-- SslCertTranslator  (sslcert)     version, alert_level, alert_description,
|                                    success, rtt
+-- DnsTranslator      (dns)         success, rtt, answer
```

Attributes:
    TRANSLATOR_REGISTRY: Measurement type to translator class.

See Also:
    [atlas_exporter.services.collector.MeasurementCollector][]: Bridges a
        translator to a ``prometheus_client`` registry.
"""

from atlas_exporter.models.constants import MeasurementType

from .base import (
    DEFAULT_NAMESPACE,
    TARGET_LABELS,
    BaseTranslator,
    DescriptorTable,
    MetricSpec,
    build_fq_name,
)
from .certificate import CertificateIdentity
from .dns import ANSWER_LABELS, AddressAnswer, DnsTranslator, decode_answers
from .sslcert import CERT_LABELS, SslCertTranslator


TRANSLATOR_REGISTRY: dict[MeasurementType, type[BaseTranslator]] = {
    MeasurementType.DNS: DnsTranslator,
    MeasurementType.SSLCERT: SslCertTranslator,
}


__all__ = [
    "ANSWER_LABELS",
    "CERT_LABELS",
    "DEFAULT_NAMESPACE",
    "TARGET_LABELS",
    "TRANSLATOR_REGISTRY",
    "AddressAnswer",
    "BaseTranslator",
    "CertificateIdentity",
    "DescriptorTable",
    "DnsTranslator",
    "MetricSpec",
    "SslCertTranslator",
    "build_fq_name",
    "decode_answers",
]
