"""
utils/geo_lookup.py
────────────────────────────────────────────
IP-Geolokalisierung für Scan-Logs.
- Vertrag: lookup(ip) → LocationData, niemals Exception
- Standard: ipapi.co-kompatible HTTP-API über httpx
- Fehler / Nicht-200 / private IPs → "Unknown"
────────────────────────────────────────────
"""

from __future__ import annotations

import ipaddress
import logging
import os
from typing import Any, Optional, Protocol

import httpx

from utils.qr_types import UNKNOWN, UNKNOWN_LOCATION, LocationData

logger = logging.getLogger(__name__)

DEFAULT_GEO_LOOKUP_URL = "https://ipapi.co/{ip}/json/"


class GeoLookup(Protocol):
    def lookup(self, ip_address: Optional[str]) -> LocationData:
        ...


def is_public_ip(ip_address: Optional[str]) -> bool:
    try:
        return ipaddress.ip_address((ip_address or "").strip()).is_global
    except ValueError:
        return False


def _coordinate(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class HttpGeoLookup:
    """Fragt eine HTTP-Geo-API ab; Provider über GEO_LOOKUP_URL austauschbar."""

    def __init__(
        self,
        url_template: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url_template = url_template or os.getenv("GEO_LOOKUP_URL", DEFAULT_GEO_LOOKUP_URL)
        self.timeout = timeout if timeout is not None else float(os.getenv("GEO_LOOKUP_TIMEOUT", "3.0"))
        self._client = client

    def _fetch(self, url: str) -> httpx.Response:
        if self._client is not None:
            return self._client.get(url)
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(url)

    def lookup(self, ip_address: Optional[str]) -> LocationData:
        # Private / lokale Adressen würden den Server selbst lokalisieren
        if not is_public_ip(ip_address):
            return UNKNOWN_LOCATION

        url = self.url_template.format(ip=ip_address.strip())
        try:
            response = self._fetch(url)
            if response.status_code != 200:
                logger.warning(f"⚠️ Geo-Lookup HTTP {response.status_code} für {ip_address}")
                return UNKNOWN_LOCATION
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"⚠️ Geo-Lookup fehlgeschlagen für {ip_address}: {exc}")
            return UNKNOWN_LOCATION

        if not isinstance(data, dict) or data.get("error"):
            logger.warning(f"⚠️ Geo-Lookup ohne Ergebnis für {ip_address}")
            return UNKNOWN_LOCATION

        return LocationData(
            country=data.get("country_name") or UNKNOWN,
            city=data.get("city") or UNKNOWN,
            latitude=_coordinate(data.get("latitude")),
            longitude=_coordinate(data.get("longitude")),
        )
