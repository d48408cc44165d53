"""Shared constants for the models layer.

Defines enumerations and sentinel values used across the models and
translators layers. Placing them here avoids circular dependencies.

See Also:
    [atlas_exporter.models.result][]: Uses
        [MeasurementType][atlas_exporter.models.constants.MeasurementType]
        to tag parsed results.
    [atlas_exporter.translators.dns][]: Dispatches answer records on
        [RecordType][atlas_exporter.models.constants.RecordType].
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class MeasurementType(StrEnum):
    """Measurement types with a registered translator.

    The value matches the ``type`` field of a RIPE Atlas result document
    and doubles as the metric subsystem (``atlas_dns_*``, ``atlas_sslcert_*``).

    Attributes:
        DNS: DNS lookup, single resolver or fanned out to several.
        SSLCERT: SSL/TLS handshake collecting the presented certificate chain.
    """

    DNS = "dns"
    SSLCERT = "sslcert"


class RecordType(StrEnum):
    """Tagged variant over DNS answer record kinds.

    Only address records produce answer samples; every other kind
    collapses into ``OTHER`` and is ignored by the DNS translator.
    """

    A = "A"
    AAAA = "AAAA"
    OTHER = "OTHER"


class AddressFamily(IntEnum):
    """IP address family as reported in the ``af`` field."""

    IPV4 = 4
    IPV6 = 6


UNKNOWN_ISSUER = "unknown"
"""Display value for a certificate issuer that could not be resolved."""
