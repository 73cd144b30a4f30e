from __future__ import annotations

import logging
from typing import Protocol

from ..attendance.model import Location
from ..core.constants import UNKNOWN_PLACE
from ..core.exceptions import GeolocationError

logger = logging.getLogger(__name__)


class GeolocationResolver(Protocol):
    """Maps device coordinates to a human-readable place.

    Implementations raise ``GeolocationError`` when the lookup fails.
    """

    def resolve(self, lat: float, lng: float) -> Location:
        raise NotImplementedError


def unknown_location(lat: float, lng: float) -> Location:
    return Location(lat=lat, lng=lng, place=UNKNOWN_PLACE, area="")


def resolve_or_unknown(resolver: GeolocationResolver, lat: float, lng: float) -> Location:
    """Resolve coordinates, degrading to an unknown place instead of failing."""
    try:
        return resolver.resolve(lat, lng)
    except GeolocationError as exc:
        logger.warning("geolocation lookup failed, using unknown place", extra={"lat": lat, "lng": lng, "error": str(exc)})
        return unknown_location(lat, lng)
