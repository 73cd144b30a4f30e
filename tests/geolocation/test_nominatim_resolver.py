import pytest
import requests

from staffclock.core.exceptions import GeolocationError
from staffclock.geolocation.nominatim_resolver import NominatimResolver
from staffclock.geolocation.resolver import resolve_or_unknown


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_resolves_place_and_area():
    session = FakeSession(FakeResponse({"address": {"city": "Kuala Lumpur", "suburb": "Ampang"}}))
    resolver = NominatimResolver(url="https://geo.test/reverse", timeout=2.5, session=session)

    loc = resolver.resolve(3.16, 101.76)

    assert (loc.place, loc.area, loc.lat, loc.lng) == ("Kuala Lumpur", "Ampang", 3.16, 101.76)
    url, kwargs = session.calls[0]
    assert url == "https://geo.test/reverse"
    assert kwargs["timeout"] == (2.5, 2.5)
    assert kwargs["params"]["lat"] == 3.16
    assert kwargs["params"]["lon"] == 101.76
    assert kwargs["params"]["format"] == "json"


def test_connect_and_read_timeouts_are_separate():
    session = FakeSession(FakeResponse({"address": {"city": "Kuala Lumpur"}}))

    NominatimResolver(timeout=4, connect_timeout=1.5, session=session).resolve(3.0, 101.0)

    _, kwargs = session.calls[0]
    assert kwargs["timeout"] == (1.5, 4.0)


def test_falls_back_through_address_keys():
    session = FakeSession(FakeResponse({"address": {"village": "Kampung Baru", "county": "Gombak", "hamlet": "Lot 5"}}))

    loc = NominatimResolver(session=session).resolve(3.0, 101.0)

    assert (loc.place, loc.area) == ("Kampung Baru", "Lot 5")


def test_missing_address_gives_unknown_place():
    loc = NominatimResolver(session=FakeSession(FakeResponse({}))).resolve(3.0, 101.0)

    assert (loc.place, loc.area) == ("Unknown", "")


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.Timeout("too slow")),
        FakeSession(error=requests.ConnectionError("offline")),
        FakeSession(FakeResponse({}, status_code=503)),
        FakeSession(FakeResponse(ValueError("not json"))),
        FakeSession(FakeResponse(["unexpected"])),
    ],
)
def test_failures_raise_geolocation_error(session):
    with pytest.raises(GeolocationError):
        NominatimResolver(session=session).resolve(3.0, 101.0)


def test_resolve_or_unknown_degrades_on_timeout():
    resolver = NominatimResolver(session=FakeSession(error=requests.Timeout("too slow")))

    loc = resolve_or_unknown(resolver, 3.0, 101.0)

    assert (loc.place, loc.area, loc.lat, loc.lng) == ("Unknown", "", 3.0, 101.0)
