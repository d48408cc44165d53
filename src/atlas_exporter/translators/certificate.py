"""
Certificate chain identity extraction.

Turns the raw certificate blobs reported by an sslcert probe into a
[CertificateIdentity][atlas_exporter.translators.certificate.CertificateIdentity]:
a SHA-256 fingerprint of the leaf certificate and a display name for its
issuer. Used for change detection between polls, not for trust decisions;
no chain validation happens here.

Each blob is decoded with an ordered list of strategies (PEM first, then
bare base64 DER); the first strategy that returns bytes wins. Every
failure degrades to a fixed default:

* fingerprint -- ``""`` when the chain is empty or the first blob does
  not decode.
* issuer -- ``"unknown"`` when no blob decodes and parses as X.509, or
  when the first parseable certificate names neither an issuer
  organization nor a common name.

See Also:
    [atlas_exporter.translators.sslcert.SslCertTranslator][]: Writes the
        identity into the ``cert_fingerprint`` and ``cert_issuer`` labels.
    [atlas_exporter.utils.parsing.first_of][]: The fallback pipeline.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from cryptography import x509
from cryptography.x509.oid import NameOID

from atlas_exporter.models.constants import UNKNOWN_ISSUER
from atlas_exporter.utils.parsing import first_of


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger("atlas_exporter.translators")

_PEM_BLOCK = re.compile(
    r"-----BEGIN (?P<label>[^\r\n-]*)-----\r?\n(?P<body>.*?)-----END (?P=label)-----",
    re.DOTALL,
)


def _b64decode(text: str) -> bytes | None:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return None


def decode_pem(blob: str) -> bytes | None:
    """Return the payload of the first well-formed PEM block in *blob*.

    Blocks with RFC 1421 headers have them skipped. A block whose body is
    not valid base64 is ignored and the search continues with the next one.
    """
    for match in _PEM_BLOCK.finditer(blob):
        body = match.group("body")
        head, sep, rest = body.partition("\n\n")
        if sep and ":" in head:
            body = rest
        data = _b64decode("".join(body.split()))
        if data:
            return data
    return None


def decode_base64_der(blob: str) -> bytes | None:
    """Return *blob* decoded as standard base64, line breaks ignored."""
    data = _b64decode(blob.replace("\r", "").replace("\n", ""))
    # an empty payload is a decode failure: no fingerprint of zero bytes
    return data or None


CERTIFICATE_DECODERS: tuple[Callable[[str], bytes | None], ...] = (
    decode_pem,
    decode_base64_der,
)


def decode_certificate(blob: str) -> bytes | None:
    """Decode one blob to DER bytes, trying each of ``CERTIFICATE_DECODERS`` in order."""
    return first_of(CERTIFICATE_DECODERS, blob)


def parse_certificate(der: bytes) -> x509.Certificate | None:
    """Parse DER bytes as an X.509 certificate, ``None`` if malformed."""
    try:
        return x509.load_der_x509_certificate(der)
    except ValueError as e:
        logger.debug("cert_parse_failed error=%s", str(e))
        return None


def fingerprint(der: bytes) -> str:
    """Lowercase hex SHA-256 digest of DER bytes."""
    return hashlib.sha256(der).hexdigest()


def _label_text(attributes: Sequence[x509.NameAttribute], index: int) -> str:
    if not attributes:
        return ""
    # NUL cannot appear in a label value
    return str(attributes[index].value).replace("\x00", "")


def issuer_display_name(cert: x509.Certificate) -> str:
    """Issuer organization, else issuer common name, else ``"unknown"``."""
    issuer = cert.issuer
    return (
        _label_text(issuer.get_attributes_for_oid(NameOID.ORGANIZATION_NAME), 0)
        or _label_text(issuer.get_attributes_for_oid(NameOID.COMMON_NAME), -1)
        or UNKNOWN_ISSUER
    )


def fingerprint_from_chain(chain: Sequence[str]) -> str:
    """Fingerprint of the first blob in *chain*; the rest of the chain is ignored."""
    if not chain:
        return ""
    der = decode_certificate(chain[0])
    if der is None:
        logger.debug("cert_decode_failed position=0")
        return ""
    return fingerprint(der)


def issuer_from_chain(chain: Sequence[str]) -> str:
    """Issuer display name of the first blob that decodes and parses."""
    for position, blob in enumerate(chain):
        der = decode_certificate(blob)
        if der is None:
            logger.debug("cert_decode_failed position=%s", position)
            continue
        cert = parse_certificate(der)
        if cert is None:
            continue
        try:
            return issuer_display_name(cert)
        except ValueError as e:
            # issuer RDNs are decoded lazily and may still be malformed
            logger.debug("cert_issuer_invalid position=%s error=%s", position, str(e))
    return UNKNOWN_ISSUER


@dataclass(frozen=True, slots=True)
class CertificateIdentity:
    """Which certificate a probe was presented with.

    Attributes:
        fingerprint: Lowercase hex SHA-256 of the leaf DER, or ``""``.
        issuer: Issuer organization or common name, never empty.
    """

    fingerprint: str = ""
    issuer: str = UNKNOWN_ISSUER

    @classmethod
    def from_chain(cls, chain: Sequence[str]) -> Self:
        """Derive the identity of a certificate chain. Never raises."""
        return cls(fingerprint=fingerprint_from_chain(chain), issuer=issuer_from_chain(chain))
