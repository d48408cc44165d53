"""
SSL/TLS certificate probe translator.

Translates one ``sslcert`` result into five gauges sharing a single label
set that identifies the target and the certificate it presented:

```text
<ns>_sslcert_version            negotiated protocol version ("1.3" -> 1.3)
<ns>_sslcert_alert_level        TLS alert level (0 = no alert)
<ns>_sslcert_alert_description  TLS alert description (0 = no alert)
<ns>_sslcert_success            1 if the target answered, else 0
<ns>_sslcert_rtt                round-trip time in ms, only when success=1
```

Note:
    A version string that is not a number yields a zero gauge rather
    than dropping the result, and an absent alert yields zeros for both
    alert gauges. Nothing in ``export()`` raises for malformed input.

See Also:
    [atlas_exporter.translators.certificate.CertificateIdentity][]:
        Fingerprint and issuer derivation.
    [atlas_exporter.translators.dns.DnsTranslator][]: The DNS counterpart.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import ClassVar

from atlas_exporter.models import MeasurementResult, Probe, Sample
from atlas_exporter.models.constants import MeasurementType
from atlas_exporter.utils.parsing import parse_float

from .base import TARGET_LABELS, BaseTranslator, MetricSpec
from .certificate import CertificateIdentity


logger = logging.getLogger("atlas_exporter.translators")

CERT_LABELS: tuple[str, ...] = (*TARGET_LABELS, "cert_fingerprint", "cert_issuer")


class SslCertTranslator(BaseTranslator):
    """Translator for SSL/TLS certificate measurement results.

    Examples:
        ```python
        translator = SslCertTranslator.create("1001")
        for sample in translator.export(result, probe):
            print(sample.name, sample.value, sample.labels)
        ```
    """

    MEASUREMENT_TYPE: ClassVar[MeasurementType] = MeasurementType.SSLCERT
    METRICS: ClassVar[tuple[MetricSpec, ...]] = (
        MetricSpec("success", "Destination was reachable", CERT_LABELS),
        MetricSpec("rtt", "Round trip time in ms", CERT_LABELS),
        MetricSpec("version", "SSL/TLS version used for the request", CERT_LABELS),
        MetricSpec(
            "alert_level", "Status of the SSL/TLS certificate (0 = valid)", CERT_LABELS
        ),
        MetricSpec(
            "alert_description",
            "Description for the alert level (see RIPE Atlas documentation)",
            CERT_LABELS,
        ),
    )

    def export(self, result: MeasurementResult, probe: Probe) -> Iterator[Sample]:
        """Yield version, alert and reachability samples for one result."""
        identity = CertificateIdentity.from_chain(result.cert)
        label_values = (
            *self._target_labels(probe, result.dst_addr, result.af),
            identity.fingerprint,
            identity.issuer,
        )

        version = parse_float(result.ver)
        if version == 0 and result.ver:
            logger.debug("sslcert_version_unparsed ver=%s probe=%s", result.ver, probe.id)
        yield Sample(self._descriptors["version"], version, label_values)

        alert_level = alert_description = 0
        if result.alert is not None:
            alert_level = result.alert.level
            alert_description = result.alert.description
        yield Sample(self._descriptors["alert_level"], alert_level, label_values)
        yield Sample(self._descriptors["alert_description"], alert_description, label_values)

        yield from self._reachability(result.rt, label_values)
