from __future__ import annotations

from typing import Any, Dict

import requests

from ..attendance.model import Location
from ..core.constants import DEFAULT_GEOCODER_TIMEOUT_SECONDS, DEFAULT_GEOCODER_URL, UNKNOWN_PLACE
from ..core.exceptions import GeolocationError

_PLACE_KEYS = ("city", "town", "village", "county")
_AREA_KEYS = ("suburb", "neighbourhood", "hamlet")


def _first(address: Dict[str, Any], keys, default: str) -> str:
    for key in keys:
        value = address.get(key)
        if value:
            return str(value)
    return default


class NominatimResolver:
    """Reverse geocoding through an OpenStreetMap Nominatim endpoint.

    ``connect_timeout`` bounds opening the connection and ``timeout`` bounds
    each read from the socket, not the whole response.
    """

    def __init__(
        self,
        *,
        url: str = DEFAULT_GEOCODER_URL,
        timeout: float = DEFAULT_GEOCODER_TIMEOUT_SECONDS,
        connect_timeout: float | None = None,
        user_agent: str = "staffclock",
        session: requests.Session | None = None,
    ):
        self._url = url
        self._timeout = (float(connect_timeout if connect_timeout is not None else timeout), float(timeout))
        self._user_agent = user_agent
        self._session = session or requests.Session()

    def resolve(self, lat: float, lng: float) -> Location:
        try:
            response = self._session.get(
                self._url,
                params={
                    "format": "json",
                    "lat": lat,
                    "lon": lng,
                    "zoom": 14,
                    "addressdetails": 1,
                },
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise GeolocationError(f"reverse geocoding failed: {exc}") from exc
        except ValueError as exc:
            raise GeolocationError("reverse geocoding returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise GeolocationError("reverse geocoding returned an unexpected payload")

        address = payload.get("address") or {}
        return Location(
            lat=lat,
            lng=lng,
            place=_first(address, _PLACE_KEYS, UNKNOWN_PLACE),
            area=_first(address, _AREA_KEYS, ""),
        )
