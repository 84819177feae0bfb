# =============================================================================
# lib/geocoder.py - Geocoding Provider Client
# =============================================================================
# Resolves free-form addresses and zipcodes to coordinates using the
# MapQuest geocoding API.
#
# Usage:
#   from lib.geocoder import geocode
#   location = geocode("233 Bay State Rd Boston MA 02215")
#   location.to_geojson()
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

GEOCODER_TIMEOUT = 10


class GeocoderError(ApplicationError):
    """Raised when the geocoding provider fails or finds nothing."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="GEOCODER_ERROR", **kwargs)


@dataclass
class GeoLocation:
    """A single geocoding result."""
    latitude: float
    longitude: float
    formatted_address: str = ""
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None

    @classmethod
    def from_mapquest(cls, location: dict[str, Any]) -> "GeoLocation":
        """Create a GeoLocation from one entry of MapQuest's `locations` list."""
        lat_lng = location.get("latLng") or location.get("displayLatLng") or {}
        parts = [
            location.get("street"),
            location.get("adminArea5"),
            location.get("adminArea3"),
            location.get("postalCode"),
            location.get("adminArea1"),
        ]
        return cls(
            latitude=float(lat_lng["lat"]),
            longitude=float(lat_lng["lng"]),
            formatted_address=", ".join(part for part in parts if part),
            street=location.get("street") or None,
            city=location.get("adminArea5") or None,
            state=location.get("adminArea3") or None,
            zipcode=location.get("postalCode") or None,
            country=location.get("adminArea1") or None,
        )

    def to_geojson(self) -> dict[str, Any]:
        """
        Stored form of a bootcamp location.

        GeoJSON coordinates are [longitude, latitude].
        """
        return {
            "type": "Point",
            "coordinates": [self.longitude, self.latitude],
            "formatted_address": self.formatted_address,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipcode": self.zipcode,
            "country": self.country,
        }


def geocode(address: str) -> GeoLocation:
    """
    Geocode an address or zipcode.

    Args:
        address: Free-form address or postal code

    Returns:
        The best match

    Raises:
        GeocoderError: If the request fails or returns no usable result
    """
    try:
        response = httpx.get(
            settings.GEOCODER_URL,
            params={"key": settings.GEOCODER_API_KEY, "location": address, "maxResults": 1},
            timeout=GEOCODER_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as e:
        logger.error(f"Geocoding request failed for {address!r}: {e}")
        raise GeocoderError(
            f"Geocoding request failed: {e}",
            suggestion="Check GEOCODER_API_KEY and provider availability",
            details={"address": address},
        )

    try:
        location = payload["results"][0]["locations"][0]
        result = GeoLocation.from_mapquest(location)
    except (KeyError, IndexError, TypeError, ValueError):
        raise GeocoderError(
            f"No geocoding result for {address!r}",
            suggestion="Check that the address or zipcode is correct",
            details={"address": address},
        )

    logger.debug(f"Geocoded {address!r} to ({result.latitude}, {result.longitude})")
    return result
