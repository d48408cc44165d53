"""
Vantage point metadata for a RIPE Atlas probe.

[Probe][atlas_exporter.models.probe.Probe] is the read-only value object
the translators use to label every sample with where the measurement was
taken from: probe id, autonomous system per address family, country and
coordinates. It is resolved outside the translators (from the probe API
or a local file) and passed in once per export call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Self

from ._validation import (
    get_int,
    get_str,
    validate_int,
    validate_mapping,
    validate_number,
    validate_str_no_null,
)
from .constants import AddressFamily


def format_coordinate(value: float | None) -> str:
    """Render a coordinate as its shortest decimal string.

    Integral values drop the fractional part (``5.0`` renders as ``"5"``)
    and a missing coordinate renders as the empty string.
    """
    if value is None:
        return ""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


@dataclass(frozen=True, slots=True)
class Probe:
    """Immutable description of a measurement vantage point.

    Attributes:
        id: Numeric probe identifier.
        asn_v4: Autonomous system announcing the probe's IPv4 prefix (0 if unknown).
        asn_v6: Autonomous system announcing the probe's IPv6 prefix (0 if unknown).
        country_code: ISO 3166-1 alpha-2 country code, or empty.
        latitude: Latitude in decimal degrees, or ``None``.
        longitude: Longitude in decimal degrees, or ``None``.

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If ``country_code`` contains null bytes.

    Examples:
        ```python
        probe = Probe.from_dict({
            "id": 6001,
            "asn_v4": 3320,
            "country_code": "DE",
            "geometry": {"type": "Point", "coordinates": [13.4, 52.5]},
        })
        probe.asn_for_ip_version(4)  # 3320
        probe.lat                    # '52.5'
        ```
    """

    id: int
    asn_v4: int = 0
    asn_v6: int = 0
    country_code: str = ""
    latitude: float | None = None
    longitude: float | None = None

    def __post_init__(self) -> None:
        validate_int(self.id, "id")
        validate_int(self.asn_v4, "asn_v4")
        validate_int(self.asn_v6, "asn_v6")
        validate_str_no_null(self.country_code, "country_code")
        if self.latitude is not None:
            validate_number(self.latitude, "latitude")
        if self.longitude is not None:
            validate_number(self.longitude, "longitude")

    def asn_for_ip_version(self, af: int) -> int:
        """Return the ASN for address family *af*, or 0 for an unknown family."""
        if af == AddressFamily.IPV4:
            return self.asn_v4
        if af == AddressFamily.IPV6:
            return self.asn_v6
        return 0

    @property
    def lat(self) -> str:
        """Latitude rendered as a label value."""
        return format_coordinate(self.latitude)

    @property
    def long(self) -> str:
        """Longitude rendered as a label value."""
        return format_coordinate(self.longitude)

    @classmethod
    def from_dict(cls, raw: Any) -> Self:
        """Build a probe from a RIPE Atlas probe API document.

        Coordinates are read from ``geometry.coordinates`` in GeoJSON
        ``[longitude, latitude]`` order. Missing or mistyped optional
        fields fall back to their defaults.

        Raises:
            TypeError: If *raw* is not a mapping or ``id`` is not an int.
        """
        validate_mapping(raw, "probe")
        latitude: float | None = None
        longitude: float | None = None
        geometry = raw.get("geometry")
        if isinstance(geometry, dict):
            coordinates = geometry.get("coordinates")
            if (
                isinstance(coordinates, list)
                and len(coordinates) == 2
                and all(
                    isinstance(c, (int, float)) and not isinstance(c, bool) for c in coordinates
                )
            ):
                longitude, latitude = float(coordinates[0]), float(coordinates[1])

        return cls(
            id=raw.get("id"),  # type: ignore[arg-type]
            asn_v4=get_int(raw, "asn_v4"),
            asn_v6=get_int(raw, "asn_v6"),
            country_code=get_str(raw, "country_code"),
            latitude=latitude,
            longitude=longitude,
        )
