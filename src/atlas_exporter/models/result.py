"""
Measurement results as reported by RIPE Atlas probes.

A single result document describes one probe execution. Its shape varies
with the measurement type and with how the probe fanned out:

* **sslcert** -- top-level ``rt``, ``ver``, ``cert`` chain and an optional
  ``alert``.
* **dns, single target** -- top-level ``dst_addr``/``af`` and a nested
  ``result`` carrying ``rt`` and the raw answer buffer ``abuf``.
* **dns, multi target** -- a ``resultset`` list, one entry per resolver,
  each with its own ``dst_addr``/``af`` and either a ``result`` or an
  ``error``.

``from_dict()`` reads every optional field tolerantly: a missing or
mistyped field becomes its default instead of failing the whole document.
The raw DNS buffer is kept undecoded; decoding it is the translator's job.

See Also:
    [atlas_exporter.translators.sslcert.SslCertTranslator][]: Consumes
        sslcert results.
    [atlas_exporter.translators.dns.DnsTranslator][]: Consumes dns results.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Self

from ._validation import (
    get_float,
    get_int,
    get_str,
    validate_int,
    validate_mapping,
    validate_str_no_null,
)


def _freeze_error(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, Mapping):
        return MappingProxyType(dict(value))
    if isinstance(value, str) and value:
        return MappingProxyType({"message": value})
    return None


@dataclass(frozen=True, slots=True)
class SslAlert:
    """TLS alert raised during the handshake.

    Codes follow the TLS alert protocol (RFC 8446 section 6): ``level`` is
    1 (warning) or 2 (fatal), ``description`` identifies the alert.
    """

    level: int
    description: int

    def __post_init__(self) -> None:
        validate_int(self.level, "level")
        validate_int(self.description, "description")

    @classmethod
    def from_dict(cls, raw: Any) -> Self | None:
        """Parse an ``alert`` object, returning ``None`` when it is absent or not a mapping."""
        if not isinstance(raw, Mapping):
            return None
        return cls(level=get_int(raw, "level"), description=get_int(raw, "description"))


@dataclass(frozen=True, slots=True)
class DnsResponse:
    """The ``result`` object of a DNS measurement.

    Attributes:
        rt: Round-trip time in milliseconds (0 when not measured).
        abuf: Base64 encoded DNS response message, if the probe captured one.
    """

    rt: float = 0.0
    abuf: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> Self | None:
        """Parse a ``result`` object, returning ``None`` when it is absent or not a mapping."""
        if not isinstance(raw, Mapping):
            return None
        abuf = raw.get("abuf")
        return cls(rt=get_float(raw, "rt"), abuf=abuf if isinstance(abuf, str) else None)


@dataclass(frozen=True, slots=True)
class DnsResultset:
    """One resolver's outcome within a fanned-out DNS measurement.

    Attributes:
        dst_addr: Address of the resolver that was queried.
        af: Address family used to reach the resolver (4 or 6).
        result: Parsed response, or ``None`` when the query produced none.
        error: Error object reported by the probe (e.g. ``{"timeout": 5000}``).
    """

    dst_addr: str = ""
    af: int = 0
    result: DnsResponse | None = None
    error: Mapping[str, Any] | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> Self | None:
        """Parse a ``resultset`` entry, returning ``None`` for non-mapping entries."""
        if not isinstance(raw, Mapping):
            return None
        return cls(
            dst_addr=get_str(raw, "dst_addr"),
            af=get_int(raw, "af"),
            result=DnsResponse.from_dict(raw.get("result")),
            error=_freeze_error(raw.get("error")),
        )


@dataclass(frozen=True, slots=True)
class MeasurementResult:
    """Immutable view of one RIPE Atlas result document.

    Only the fields the translators read are kept. All of them have
    defaults, so partially populated documents still yield a usable
    instance.

    Attributes:
        type: Measurement type string (``dns``, ``sslcert``, ...).
        msm_id: Measurement identifier.
        prb_id: Identifier of the probe that produced the result.
        timestamp: Unix timestamp of the probe execution.
        dst_addr: Target address.
        af: Address family (4 or 6).
        rt: Top-level round-trip time in milliseconds (sslcert).
        ver: Negotiated SSL/TLS protocol version, e.g. ``"1.2"``.
        cert: Presented certificate chain, PEM or base64 DER blobs.
        alert: TLS alert, if the handshake raised one.
        dns_result: Single-target DNS response.
        resultsets: Multi-target DNS sub-results; ``None`` marks an
            unparseable entry and keeps its position.

    Examples:
        ```python
        result = MeasurementResult.from_dict({
            "type": "sslcert",
            "msm_id": 1001,
            "prb_id": 6001,
            "dst_addr": "93.184.216.34",
            "af": 4,
            "rt": 42.5,
            "ver": "1.3",
            "cert": ["-----BEGIN CERTIFICATE-----\\n..."],
        })
        result.is_multi_target  # False
        ```
    """

    type: str = ""
    msm_id: int = 0
    prb_id: int = 0
    timestamp: int = 0
    dst_addr: str = ""
    af: int = 0
    rt: float = 0.0
    ver: str = ""
    cert: tuple[str, ...] = ()
    alert: SslAlert | None = None
    dns_result: DnsResponse | None = None
    resultsets: tuple[DnsResultset | None, ...] = field(default=())

    def __post_init__(self) -> None:
        validate_str_no_null(self.type, "type")
        validate_str_no_null(self.dst_addr, "dst_addr")
        validate_int(self.af, "af")
        for blob in self.cert:
            validate_str_no_null(blob, "cert")

    @property
    def is_multi_target(self) -> bool:
        """Whether the probe fanned the query out to several resolvers."""
        return len(self.resultsets) > 0

    @classmethod
    def from_dict(cls, raw: Any) -> Self:
        """Build a result from a RIPE Atlas result document.

        Raises:
            TypeError: If *raw* is not a mapping.
        """
        validate_mapping(raw, "result")

        cert_raw = raw.get("cert")
        cert: tuple[str, ...] = ()
        if isinstance(cert_raw, list):
            cert = tuple(c for c in cert_raw if isinstance(c, str) and "\x00" not in c)

        resultset_raw = raw.get("resultset")
        resultsets: tuple[DnsResultset | None, ...] = ()
        if isinstance(resultset_raw, list):
            resultsets = tuple(DnsResultset.from_dict(entry) for entry in resultset_raw)

        return cls(
            type=get_str(raw, "type"),
            msm_id=get_int(raw, "msm_id"),
            prb_id=get_int(raw, "prb_id"),
            timestamp=get_int(raw, "timestamp"),
            dst_addr=get_str(raw, "dst_addr"),
            af=get_int(raw, "af"),
            rt=get_float(raw, "rt"),
            ver=get_str(raw, "ver"),
            cert=cert,
            alert=SslAlert.from_dict(raw.get("alert")),
            dns_result=DnsResponse.from_dict(raw.get("result")),
            resultsets=resultsets,
        )
