"""
utils/content_encoder.py
────────────────────────────────────────────
Reine String-Builder für QR-Inhalte.
- vCard, iCalendar-Event, geo:, mailto:, tel:, sms:, Social-Profil
- encode_payload(): was ein QR-Code eines Typs tatsächlich kodiert
Fehlende Felder → Zeile wird weggelassen, nie "LABEL:" ohne Wert.
────────────────────────────────────────────
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

logger = logging.getLogger(__name__)

EVENT_PRODID = "-//QR Canvas Pro//Event//EN"
EVENT_UID_DOMAIN = "qrcanvaspro.com"

SOCIAL_BASE_URLS: Dict[str, str] = {
    "instagram": "https://instagram.com/",
    "facebook": "https://facebook.com/",
    "linkedin": "https://linkedin.com/in/",
    "twitter": "https://twitter.com/",
    "tiktok": "https://tiktok.com/@",
    "youtube": "https://youtube.com/@",
    "snapchat": "https://snapchat.com/add/",
}


def encode_component(value: Any) -> str:
    """Prozent-Kodierung wie encodeURIComponent im Browser."""
    return quote(str(value), safe="!~*'()")


def _field(data: Dict[str, Any], *keys: str) -> str:
    # Editor liefert camelCase, ältere Datensätze snake_case
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def _line(label: str, value: str) -> List[str]:
    return [f"{label}:{value}"] if value else []


# ─────────────────────────────────────────────
# 👤 vCard
# ─────────────────────────────────────────────
def build_vcard(data: Dict[str, Any]) -> str:
    first_name = _field(data, "firstName", "first_name")
    last_name = _field(data, "lastName", "last_name")
    full_name = f"{first_name} {last_name}".strip()

    lines = ["BEGIN:VCARD", "VERSION:3.0"]
    lines += _line("FN", full_name)
    if first_name or last_name:
        lines.append(f"N:{last_name};{first_name};;;")
    lines += _line("ORG", _field(data, "company", "organization", "org"))
    lines += _line("TITLE", _field(data, "jobTitle", "job_title", "title"))
    lines += _line("TEL", _field(data, "phone"))
    lines += _line("EMAIL", _field(data, "email"))
    lines += _line("URL", _field(data, "website", "url"))
    address = _field(data, "address")
    if address:
        lines.append(f"ADR:;;{address};;;;")
    lines.append("END:VCARD")
    return "\n".join(lines)


# ─────────────────────────────────────────────
# 📅 iCalendar-Event
# ─────────────────────────────────────────────
def format_ical_datetime(value: Union[str, datetime, None]) -> str:
    """ISO-Datum → YYYYMMDDTHHMMSSZ (UTC). Ungültig → leerer String."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"⚠️ Ungültiges Event-Datum ignoriert: {value!r}")
            return ""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def build_event(
    data: Dict[str, Any],
    now: Optional[datetime] = None,
    uid: Optional[str] = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    uid = uid or f"{int(now.timestamp() * 1000)}@{EVENT_UID_DOMAIN}"

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{EVENT_PRODID}",
        "BEGIN:VEVENT",
    ]
    lines += _line("SUMMARY", _field(data, "title", "summary"))
    lines += _line("DESCRIPTION", _field(data, "description"))
    lines += _line("LOCATION", _field(data, "location"))
    lines += _line("DTSTART", format_ical_datetime(data.get("startDate") or data.get("start_date")))
    lines += _line("DTEND", format_ical_datetime(data.get("endDate") or data.get("end_date")))
    lines += _line("DTSTAMP", format_ical_datetime(now))
    lines += _line("UID", uid)
    lines += ["END:VEVENT", "END:VCALENDAR"]
    return "\n".join(lines)


# ─────────────────────────────────────────────
# 🌍 Geo
# ─────────────────────────────────────────────
def build_geo_uri(latitude: Any, longitude: Any, place_name: Optional[str] = None) -> str:
    uri = f"geo:{latitude},{longitude}"
    if place_name:
        uri += f"?q={encode_component(place_name)}"
    return uri


def format_coordinates(latitude: float, longitude: float) -> str:
    lat_dir = "N" if latitude >= 0 else "S"
    lng_dir = "E" if longitude >= 0 else "W"
    return f"{abs(latitude):.4f}°{lat_dir}, {abs(longitude):.4f}°{lng_dir}"


# ─────────────────────────────────────────────
# ✉️ Kommunikation
# ─────────────────────────────────────────────
def build_mailto(email: str, subject: str = "", body: str = "") -> str:
    return (
        f"mailto:{email}"
        f"?subject={encode_component(subject or '')}"
        f"&body={encode_component(body or '')}"
    )


def build_tel(phone: str) -> str:
    return f"tel:{phone}"


def build_sms_uri(phone: str, message: str = "") -> str:
    uri = f"sms:{phone}"
    if message:
        uri += f"?body={encode_component(message)}"
    return uri


def build_smsto(phone: str, message: str = "") -> str:
    """SMS-Payload für den QR-Code selbst (Scanner-Apps erwarten SMSTO:)."""
    return f"SMSTO:{phone}:{message or ''}"


# ─────────────────────────────────────────────
# 📱 Social
# ─────────────────────────────────────────────
def clean_handle(username: Optional[str]) -> str:
    return re.sub(r"^@", "", (username or "").strip())


def build_social_url(platform: str, username: str = "", profile_url: str = "") -> str:
    if profile_url and profile_url.strip():
        profile_url = profile_url.strip()
        return profile_url if profile_url.startswith("http") else f"https://{profile_url}"

    handle = clean_handle(username)
    platform = (platform or "").strip().lower()
    base = SOCIAL_BASE_URLS.get(platform)
    if base:
        return f"{base}{handle}"
    return f"https://{platform}.com/{handle}"


# ─────────────────────────────────────────────
# 🔗 Kurzlink & Payload-Dispatcher
# ─────────────────────────────────────────────
def build_short_link(base_url: str, qr_id: str, qr_type: str = "") -> str:
    """Kurzlink, den dynamische QR-Codes kodieren (/menu/ für Multi-Action)."""
    base = base_url.rstrip("/")
    if (qr_type or "").lower() == "multi-action":
        return f"{base}/menu/{qr_id}"
    return f"{base}/qr/{qr_id}"


def encode_payload(content_type: str, data: Dict[str, Any]) -> str:
    """
    Liefert den String, den ein statischer QR-Code des Typs kodiert.
    Unbekannter Typ → leerer String (Renderer zeigt dann nichts an).
    """
    content_type = (content_type or "").lower()

    if content_type == "url":
        return _field(data, "url")
    if content_type == "text":
        return _field(data, "text")
    if content_type in ("contact", "vcard"):
        return build_vcard(data)
    if content_type == "sms":
        return build_smsto(_field(data, "phone"), _field(data, "message"))
    if content_type == "email":
        return build_mailto(_field(data, "email"), _field(data, "subject"), _field(data, "body"))
    if content_type == "phone":
        return build_tel(_field(data, "phone"))
    if content_type in ("location", "geo"):
        return build_geo_uri(data.get("latitude"), data.get("longitude"), _field(data, "placeName", "place_name"))
    if content_type == "app":
        return _field(data, "iosUrl", "androidUrl")
    if content_type in ("socials", "social"):
        return build_social_url(
            _field(data, "platform"),
            _field(data, "username"),
            _field(data, "profileUrl", "profile_url"),
        )
    if content_type == "event":
        return build_event(data)

    logger.warning(f"⚠️ Unbekannter Inhaltstyp: {content_type}")
    return ""
