from __future__ import annotations

import httpx
import pytest

from utils.geo_lookup import HttpGeoLookup, is_public_ip
from utils.qr_types import UNKNOWN_LOCATION, LocationData

PUBLIC_IP = "93.184.216.34"


def _lookup(handler) -> HttpGeoLookup:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpGeoLookup(url_template="https://geo.test/{ip}/json/", client=client)


@pytest.mark.parametrize(
    "ip,expected",
    [
        (PUBLIC_IP, True),
        ("127.0.0.1", False),
        ("10.0.0.7", False),
        ("192.168.1.20", False),
        ("::1", False),
        ("not-an-ip", False),
        (None, False),
    ],
)
def test_is_public_ip(ip, expected):
    assert is_public_ip(ip) is expected


def test_successful_lookup_maps_fields():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(
            200,
            json={"country_name": "Germany", "city": "Hamburg", "latitude": 53.55, "longitude": "9.99"},
        )

    location = _lookup(handler).lookup(PUBLIC_IP)

    assert seen == [f"https://geo.test/{PUBLIC_IP}/json/"]
    assert location == LocationData(country="Germany", city="Hamburg", latitude=53.55, longitude=9.99)


def test_missing_fields_become_unknown():
    location = _lookup(lambda request: httpx.Response(200, json={"latitude": None})).lookup(PUBLIC_IP)
    assert location.country == "Unknown"
    assert location.city == "Unknown"
    assert location.latitude is None


def test_non_200_is_unknown():
    assert _lookup(lambda request: httpx.Response(429)).lookup(PUBLIC_IP) == UNKNOWN_LOCATION


def test_error_payload_is_unknown():
    payload = {"error": True, "reason": "RateLimited"}
    assert _lookup(lambda request: httpx.Response(200, json=payload)).lookup(PUBLIC_IP) == UNKNOWN_LOCATION


def test_invalid_json_is_unknown():
    assert _lookup(lambda request: httpx.Response(200, text="<html>")).lookup(PUBLIC_IP) == UNKNOWN_LOCATION


def test_network_error_is_unknown():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    assert _lookup(handler).lookup(PUBLIC_IP) == UNKNOWN_LOCATION


def test_private_ip_never_hits_the_network():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    lookup = _lookup(handler)
    assert lookup.lookup("192.168.0.10") == UNKNOWN_LOCATION
    assert lookup.lookup(None) == UNKNOWN_LOCATION


def test_url_template_from_environment(monkeypatch):
    monkeypatch.setenv("GEO_LOOKUP_URL", "https://other.test/{ip}")
    monkeypatch.setenv("GEO_LOOKUP_TIMEOUT", "1.5")
    lookup = HttpGeoLookup()
    assert lookup.url_template == "https://other.test/{ip}"
    assert lookup.timeout == 1.5
