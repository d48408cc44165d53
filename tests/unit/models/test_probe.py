"""
Unit tests for models.probe module.

Tests:
- Probe construction and field validation
- Per-address-family ASN selection
- Coordinate rendering as label values
- from_dict() parsing of RIPE Atlas probe documents
"""

import pytest

from atlas_exporter.models import Probe
from atlas_exporter.models.probe import format_coordinate


class TestConstruction:
    """Probe construction and validation."""

    def test_defaults(self):
        probe = Probe(id=1)
        assert probe.asn_v4 == 0
        assert probe.asn_v6 == 0
        assert probe.country_code == ""
        assert probe.latitude is None
        assert probe.longitude is None

    def test_frozen(self, probe):
        with pytest.raises(AttributeError):
            probe.id = 2  # type: ignore[misc]

    def test_id_must_be_int(self):
        with pytest.raises(TypeError, match="id must be an int"):
            Probe(id="6001")  # type: ignore[arg-type]

    def test_bool_id_rejected(self):
        with pytest.raises(TypeError):
            Probe(id=True)

    def test_country_code_null_byte_rejected(self):
        with pytest.raises(ValueError, match="null bytes"):
            Probe(id=1, country_code="D\x00E")

    def test_non_finite_latitude_rejected(self):
        with pytest.raises(ValueError, match="finite"):
            Probe(id=1, latitude=float("nan"))

    def test_string_longitude_rejected(self):
        with pytest.raises(TypeError, match="longitude must be a number"):
            Probe(id=1, longitude="13.4")  # type: ignore[arg-type]


class TestAsnForIpVersion:
    """ASN selection by address family."""

    def test_ipv4(self, probe):
        assert probe.asn_for_ip_version(4) == 3320

    def test_ipv6(self, probe):
        assert probe.asn_for_ip_version(6) == 6805

    @pytest.mark.parametrize("af", [0, 5, -1])
    def test_unknown_family(self, probe, af):
        assert probe.asn_for_ip_version(af) == 0


class TestCoordinates:
    """Coordinate rendering."""

    def test_probe_properties(self, probe):
        assert probe.lat == "52.5"
        assert probe.long == "13.4"

    def test_missing(self):
        probe = Probe(id=1)
        assert probe.lat == ""
        assert probe.long == ""

    def test_integral_value_drops_fraction(self):
        assert format_coordinate(5.0) == "5"
        assert format_coordinate(5) == "5"

    def test_negative(self):
        assert format_coordinate(-33.8688) == "-33.8688"


class TestFromDict:
    """Parsing probe API documents."""

    def test_full_document(self, probe_document, probe):
        assert Probe.from_dict(probe_document) == probe

    def test_geojson_order(self):
        probe = Probe.from_dict({"id": 1, "geometry": {"coordinates": [10.0, 20.0]}})
        assert probe.longitude == 10.0
        assert probe.latitude == 20.0

    def test_missing_geometry(self):
        probe = Probe.from_dict({"id": 1})
        assert probe.latitude is None
        assert probe.longitude is None

    def test_malformed_coordinates_ignored(self):
        probe = Probe.from_dict({"id": 1, "geometry": {"coordinates": ["a", "b"]}})
        assert probe.latitude is None

    def test_null_asn_defaults_to_zero(self):
        probe = Probe.from_dict({"id": 1, "asn_v4": None, "asn_v6": "x"})
        assert probe.asn_v4 == 0
        assert probe.asn_v6 == 0

    def test_null_country_code_defaults_to_empty(self):
        assert Probe.from_dict({"id": 1, "country_code": None}).country_code == ""

    def test_missing_id_raises(self):
        with pytest.raises(TypeError):
            Probe.from_dict({"asn_v4": 1})

    def test_not_a_mapping_raises(self):
        with pytest.raises(TypeError, match="probe must be a Mapping"):
            Probe.from_dict([1, 2])
