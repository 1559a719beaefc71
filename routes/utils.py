from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from utils.action_dispatch import describe_menu_action
from utils.geo_lookup import GeoLookup, HttpGeoLookup
from utils.outcomes import ActionMenu, Failure, FailureKind
from utils.qr_types import LocationData, MenuActionKind, ScanContext, UNKNOWN

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))

# Status je Fehlerart (404 nicht gefunden, 410 kein Ziel, sonst 400)
FAILURE_STATUS: Dict[FailureKind, int] = {
    FailureKind.NOT_FOUND_OR_INACTIVE: 404,
    FailureKind.NO_DESTINATION: 410,
    FailureKind.INVALID_LOCATION: 400,
    FailureKind.UNKNOWN_ACTION: 400,
    FailureKind.MISSING_FIELD: 400,
}

NEW_CONTEXT_ACTIONS = {MenuActionKind.WEBSITE, MenuActionKind.WHATSAPP, MenuActionKind.DIRECTIONS}

# Anführungszeichen, Backslash, Steuerzeichen und alles außerhalb von ASCII
_UNSAFE_FILENAME_RE = re.compile(r"[\"\\\x00-\x1f\x7f-\U0010ffff]")


# --------------------------------------------------------------------------- #
# 🌐 Scan-Kontext aus dem Request
# --------------------------------------------------------------------------- #

def client_ip(request: Request) -> Optional[str]:
    """Erste Adresse aus X-Forwarded-For, sonst die Socket-Adresse."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        first = forwarded.split(",", 1)[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def build_scan_context(request: Request) -> ScanContext:
    # Land kann bereits vom CDN / Proxy mitgeliefert werden
    country = (request.headers.get("x-country") or request.headers.get("cf-ipcountry") or "").strip()
    city = (request.headers.get("x-city") or "").strip()
    location = LocationData(country=country, city=city or UNKNOWN) if country else None
    return ScanContext(
        user_agent=request.headers.get("user-agent", ""),
        referrer=request.headers.get("referer") or None,
        ip_address=client_ip(request),
        location=location,
    )


def content_disposition(filename: str, default_stem: str = "contact") -> str:
    """
    attachment-Header mit ASCII-Fallback und filename* (RFC 6266 / 5987).
    Starlette kodiert Header als Latin-1, Namen wie "Łukasz.vcf" brauchen filename*.
    """
    stem, dot, extension = (filename or "").rpartition(".")
    if not dot:
        stem, extension = filename or "", ""
    safe_stem = _UNSAFE_FILENAME_RE.sub("", stem).strip()
    safe_extension = _UNSAFE_FILENAME_RE.sub("", extension).strip()
    fallback = (safe_stem or default_stem) + (f".{safe_extension}" if safe_extension else "")

    header = f'attachment; filename="{fallback}"'
    if fallback != filename:
        header += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return header


def get_geo_lookup() -> GeoLookup:
    """FastAPI-Dependency; Tests ersetzen sie durch einen Fake."""
    return HttpGeoLookup()


# --------------------------------------------------------------------------- #
# 🧭 Navigator → Starlette-Responses
# --------------------------------------------------------------------------- #

class ResponseNavigator:
    """Übersetzt Resolver-Ergebnisse in HTTP-Antworten."""

    def __init__(self, request: Request) -> None:
        self.request = request
        self.response: Optional[Response] = None

    def redirect(self, url: str) -> None:
        self.response = RedirectResponse(url, status_code=302)

    def open_protocol(self, uri: str) -> None:
        # tel:/sms:/mailto: – der Browser übergibt an die passende App
        self.response = RedirectResponse(uri, status_code=302)

    def open_new_context(self, url: str) -> None:
        # Neuer Tab entsteht über target="_blank" im Menü; hier nur das Ziel
        self.response = RedirectResponse(url, status_code=302)

    def download(self, filename: str, content: str, media_type: str) -> None:
        self.response = Response(
            content=content,
            media_type=media_type,
            headers={"Content-Disposition": content_disposition(filename)},
        )

    def show_text(self, content: str) -> None:
        self.response = PlainTextResponse(content)

    def show_menu(self, menu: ActionMenu) -> None:
        items: List[Dict[str, Any]] = []
        for action in menu.actions:
            label, subtitle = describe_menu_action(action)
            items.append(
                {
                    "id": action.id,
                    "kind": action.action_type,
                    "label": label,
                    "subtitle": subtitle,
                    "new_context": action.kind in NEW_CONTEXT_ACTIONS,
                }
            )
        self.response = templates.TemplateResponse(
            self.request,
            "action_menu.html",
            {"qr": menu.record, "items": items},
        )

    def fail(self, failure: Failure) -> None:
        self.response = templates.TemplateResponse(
            self.request,
            "qr_error.html",
            {"message": failure.message, "kind": failure.kind.value},
            status_code=FAILURE_STATUS[failure.kind],
        )

    def finish(self) -> Response:
        """Antwort nach perform(); ohne Navigation → 503-Seite."""
        if self.response is None:
            logger.error(f"❌ Keine Antwort für {self.request.url.path} erzeugt")
            return self.unavailable()
        return self.response

    def unavailable(self) -> Response:
        """Datenquelle nicht erreichbar – kein Ziel bestimmbar."""
        self.response = templates.TemplateResponse(
            self.request,
            "qr_error.html",
            {"message": "Unable to process QR code", "kind": "unavailable"},
            status_code=503,
        )
        return self.response
