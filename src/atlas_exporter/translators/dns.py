"""
DNS probe translator.

Translates one ``dns`` result into reachability gauges per queried
resolver plus one presence gauge per address record in the response:

```text
<ns>_dns_success   1 if the resolver answered, else 0
<ns>_dns_rtt       round-trip time in ms, only when success=1
<ns>_dns_answer    1 per A/AAAA answer record (qname, rr_type, answer_ip labels)
```

A result either targets a single resolver (top-level ``dst_addr`` with a
nested ``result``) or fans out to several (``resultset``). Both shapes are
flattened into a sequence of targets and handled by the same per-target
routine, so the two shapes yield identical samples for identical data.

Note:
    The answer buffer (``abuf``) is decoded with ``dnspython`` using one
    RRset per record, which keeps the wire order of the answer section and
    preserves duplicate records. Undecodable buffers yield no answer samples
    and no error.

See Also:
    [atlas_exporter.translators.sslcert.SslCertTranslator][]: The
        certificate counterpart.
    [atlas_exporter.models.result.DnsResultset][]: Per-resolver sub-result.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar

import dns.exception
import dns.message
import dns.rdataclass
import dns.rdatatype

from atlas_exporter.models import DnsResponse, MeasurementResult, Probe, Sample
from atlas_exporter.models.constants import MeasurementType, RecordType

from .base import TARGET_LABELS, BaseTranslator, MetricSpec


logger = logging.getLogger("atlas_exporter.translators")

ANSWER_LABELS: tuple[str, ...] = (
    "measurement",
    "probe",
    "resolver",
    "asn",
    "ip_version",
    "country_code",
    "lat",
    "long",
    "qname",
    "rr_type",
    "answer_ip",
)

_RECORD_TYPES: dict[int, RecordType] = {
    dns.rdatatype.A: RecordType.A,
    dns.rdatatype.AAAA: RecordType.AAAA,
}


def record_type_of(rdtype: int) -> RecordType:
    """Map a DNS RR type code onto the ``A`` / ``AAAA`` / ``OTHER`` variant."""
    return _RECORD_TYPES.get(rdtype, RecordType.OTHER)


@dataclass(frozen=True, slots=True)
class AddressAnswer:
    """One A or AAAA record from a DNS response's answer section."""

    qname: str
    record_type: RecordType
    address: str


def decode_answers(abuf: str) -> tuple[AddressAnswer, ...] | None:
    """Decode a base64 DNS message and extract its address answers in wire order.

    ``qname`` is taken from the question section (falling back to the
    record owner name when the question is missing), without the trailing
    dot. Only IN-class A/AAAA records are kept; other classes reuse the
    type codes with unrelated rdata.

    Returns:
        The address answers, possibly empty, or ``None`` if *abuf* is not a
        decodable DNS message.
    """
    try:
        wire = base64.b64decode(abuf, validate=True)
        message = dns.message.from_wire(wire, one_rr_per_rrset=True, ignore_trailing=True)
    except (binascii.Error, ValueError, dns.exception.DNSException) as e:
        logger.debug("dns_abuf_decode_failed error=%s", str(e) or type(e).__name__)
        return None

    question = message.question[0].name if message.question else None
    answers: list[AddressAnswer] = []
    for rrset in message.answer:
        if rrset.rdclass != dns.rdataclass.IN:
            logger.debug("dns_answer_skipped rdclass=%s", dns.rdataclass.to_text(rrset.rdclass))
            continue
        record_type = record_type_of(rrset.rdtype)
        if record_type is RecordType.OTHER:
            continue
        qname = (question or rrset.name).to_text(omit_final_dot=True)
        answers.extend(
            AddressAnswer(qname=qname, record_type=record_type, address=rdata.address)
            for rdata in rrset
        )
    return tuple(answers)


@dataclass(frozen=True, slots=True)
class _Target:
    """One resolver round trip, independent of the result shape it came from."""

    dst_addr: str
    af: int
    response: DnsResponse | None
    failed: bool = False


class DnsTranslator(BaseTranslator):
    """Translator for DNS measurement results.

    Examples:
        ```python
        translator = DnsTranslator.create("2002")
        samples = list(translator.export(result, probe))
        ```
    """

    MEASUREMENT_TYPE: ClassVar[MeasurementType] = MeasurementType.DNS
    METRICS: ClassVar[tuple[MetricSpec, ...]] = (
        MetricSpec("success", "Destination was reachable", TARGET_LABELS),
        MetricSpec("rtt", "Roundtrip time in ms", TARGET_LABELS),
        MetricSpec("answer", "Address record returned by the resolver", ANSWER_LABELS),
    )

    @staticmethod
    def _targets(result: MeasurementResult) -> Iterator[_Target]:
        """Flatten single and multi-target results into one target sequence.

        Null sub-results are skipped. A sub-result carrying an error or no
        response is marked failed.
        """
        if not result.is_multi_target:
            yield _Target(result.dst_addr, result.af, result.dns_result)
            return

        for resultset in result.resultsets:
            if resultset is None:
                continue
            failed = resultset.error is not None or resultset.result is None
            yield _Target(
                resultset.dst_addr,
                resultset.af,
                None if failed else resultset.result,
                failed=failed,
            )

    def export(self, result: MeasurementResult, probe: Probe) -> Iterator[Sample]:
        """Yield reachability and answer samples for every target of one result."""
        for target in self._targets(result):
            yield from self._export_target(target, probe)

    def _export_target(self, target: _Target, probe: Probe) -> Iterator[Sample]:
        label_values = self._target_labels(probe, target.dst_addr, target.af)

        if target.failed:
            yield Sample(self._descriptors["success"], 0, label_values)
            return

        rtt = target.response.rt if target.response is not None else 0.0
        yield from self._reachability(rtt, label_values)

        if target.response is None or target.response.abuf is None:
            return
        answers = decode_answers(target.response.abuf)
        if not answers:
            return
        for answer in answers:
            yield Sample(
                self._descriptors["answer"],
                1,
                (*label_values, answer.qname, answer.record_type.value, answer.address),
            )
