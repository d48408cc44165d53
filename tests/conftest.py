"""
Pytest configuration and shared fixtures for atlas_exporter tests.

Provides:
- Probe fixtures
- X.509 certificate factories (real certificates signed with a throwaway key)
- DNS answer buffer factories built with dnspython
- Raw RIPE Atlas result documents
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import dns.message
import dns.name
import dns.rrset
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID

from atlas_exporter.models import Probe


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Probe Fixtures
# ============================================================================


@pytest.fixture
def probe() -> Probe:
    """Probe with distinct ASNs per address family."""
    return Probe(
        id=6001,
        asn_v4=3320,
        asn_v6=6805,
        country_code="DE",
        latitude=52.5,
        longitude=13.4,
    )


@pytest.fixture
def probe_document() -> dict[str, Any]:
    """RIPE Atlas probe API document matching the ``probe`` fixture."""
    return {
        "id": 6001,
        "asn_v4": 3320,
        "asn_v6": 6805,
        "country_code": "DE",
        "geometry": {"type": "Point", "coordinates": [13.4, 52.5]},
    }


# ============================================================================
# Certificate Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def signing_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


CertificateFactory = Callable[..., x509.Certificate]


@pytest.fixture(scope="session")
def make_certificate(signing_key: ec.EllipticCurvePrivateKey) -> CertificateFactory:
    """Factory building a certificate with the given issuer attributes.

    Pass ``organization`` and/or ``common_name``; omitted attributes are
    left out of the issuer name entirely.
    """

    def factory(
        *,
        organization: str | None = None,
        common_name: str | None = None,
        subject: str = "example.com",
    ) -> x509.Certificate:
        issuer_attrs = []
        if organization is not None:
            issuer_attrs.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization))
        if common_name is not None:
            issuer_attrs.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
        now = datetime(2025, 1, 1, tzinfo=UTC)
        return (
            x509.CertificateBuilder()
            .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, subject)]))
            .issuer_name(x509.Name(issuer_attrs))
            .public_key(signing_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + timedelta(days=90))
            .sign(signing_key, hashes.SHA256())
        )

    return factory


def to_pem(cert: x509.Certificate) -> str:
    """PEM text of a certificate."""
    return cert.public_bytes(Encoding.PEM).decode("ascii")


def to_base64_der(cert: x509.Certificate) -> str:
    """Single-line base64 of the DER encoding."""
    return base64.b64encode(cert.public_bytes(Encoding.DER)).decode("ascii")


def der_of(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(Encoding.DER)


@pytest.fixture
def lets_encrypt_cert(make_certificate: CertificateFactory) -> x509.Certificate:
    return make_certificate(organization="Let's Encrypt", common_name="R3")


# ============================================================================
# DNS Fixtures
# ============================================================================


def make_abuf(
    qname: str,
    records: Sequence[tuple[str, str]],
    qtype: str = "A",
    rdclass: str = "IN",
) -> str:
    """Base64 DNS response for *qname* with *records* in the answer section, in order.

    Each ``(rdtype, value)`` pair becomes its own RRset of class *rdclass*
    so duplicates and interleaved types survive on the wire.
    """
    query = dns.message.make_query(qname, qtype)
    response = dns.message.make_response(query)
    for rdtype, value in records:
        response.answer.append(dns.rrset.from_text(dns.name.from_text(qname), 300, rdclass, rdtype, value))
    return base64.b64encode(response.to_wire()).decode("ascii")


@pytest.fixture
def example_abuf() -> str:
    """Response with one A record for example.com."""
    return make_abuf("example.com", [("A", "93.184.216.34")])


# ============================================================================
# Result Documents
# ============================================================================


@pytest.fixture
def sslcert_document(lets_encrypt_cert: x509.Certificate) -> dict[str, Any]:
    """Reachable sslcert result with a one-certificate chain."""
    return {
        "type": "sslcert",
        "msm_id": 1001,
        "prb_id": 6001,
        "timestamp": 1700000000,
        "dst_addr": "93.184.216.34",
        "af": 4,
        "rt": 42.5,
        "ver": "1.3",
        "cert": [to_pem(lets_encrypt_cert)],
    }


@pytest.fixture
def dns_document(example_abuf: str) -> dict[str, Any]:
    """Reachable single-target DNS result."""
    return {
        "type": "dns",
        "msm_id": 2002,
        "prb_id": 6001,
        "timestamp": 1700000000,
        "dst_addr": "9.9.9.9",
        "af": 4,
        "result": {"rt": 12.25, "abuf": example_abuf},
    }


# ============================================================================
# Exporter Workspace
# ============================================================================


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def workspace(
    tmp_path: Path,
    probe_document: dict[str, Any],
    sslcert_document: dict[str, Any],
    dns_document: dict[str, Any],
) -> Path:
    """Directory holding ``exporter.yaml`` plus probe and result files.

    Data paths in the config are relative and resolve against the config
    file's directory.
    """
    write_json(tmp_path / "data" / "probes.json", {"results": [probe_document]})
    write_json(tmp_path / "data" / "1001.json", [sslcert_document])
    write_json(tmp_path / "data" / "2002.json", [dns_document])
    (tmp_path / "exporter.yaml").write_text(
        """
namespace: atlas
probes_path: data/probes.json
measurements:
  - id: 1001
    type: sslcert
    results_path: data/1001.json
  - id: 2002
    type: dns
    results_path: data/2002.json
metrics:
  port: 9400
""",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def config_path(workspace: Path) -> Path:
    return workspace / "exporter.yaml"
