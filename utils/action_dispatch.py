"""
utils/action_dispatch.py
────────────────────────────────────────────
Aktionstyp + Daten → konkrete Navigation.
- dispatch(): QR-Typ "action" (email / phone / sms)
- dispatch_menu_action(): ein Tipp im Multi-Action-Menü
- describe_menu_action(): Beschriftung für das Menü
Reine Funktionen; ausgeführt wird über den Navigator.
────────────────────────────────────────────
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple, Union

from utils import content_encoder
from utils.outcomes import (
    ContentDelivery,
    Failure,
    FailureKind,
    ImmediateAction,
    normalize_url,
)
from utils.qr_types import ActionKind, MenuActionKind, QrAction

GOOGLE_MAPS_DIRECTIONS = "https://www.google.com/maps/dir/?api=1&destination="
WHATSAPP_BASE = "https://wa.me/"

MENU_LABELS: Dict[MenuActionKind, str] = {
    MenuActionKind.CALL: "Call",
    MenuActionKind.WEBSITE: "Visit Website",
    MenuActionKind.WHATSAPP: "WhatsApp",
    MenuActionKind.DIRECTIONS: "Get Directions",
    MenuActionKind.VCARD: "Save Contact",
}

DispatchResult = Union[ImmediateAction, Failure]
MenuDispatchResult = Union[ImmediateAction, ContentDelivery, Failure]


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


# =============================================================================
# ✅ QR-Typ "action"
# =============================================================================
def dispatch(action_type: Any, action_data: Optional[Dict[str, Any]]) -> DispatchResult:
    kind = ActionKind.parse(action_type)
    data = action_data if isinstance(action_data, dict) else {}

    if kind is ActionKind.EMAIL:
        email = _text(data, "email")
        if not email:
            return Failure(FailureKind.MISSING_FIELD)
        uri = content_encoder.build_mailto(email, _text(data, "subject"), _text(data, "body"))
        return ImmediateAction("mailto", uri)

    if kind is ActionKind.PHONE:
        phone = _text(data, "phone")
        if not phone:
            return Failure(FailureKind.MISSING_FIELD)
        return ImmediateAction("tel", content_encoder.build_tel(phone))

    if kind is ActionKind.SMS:
        phone = _text(data, "phone")
        if not phone:
            return Failure(FailureKind.MISSING_FIELD)
        return ImmediateAction("sms", content_encoder.build_sms_uri(phone, _text(data, "message")))

    return Failure(FailureKind.UNKNOWN_ACTION)


# =============================================================================
# ✅ Multi-Action-Menü
# =============================================================================
def _directions_uri(data: Dict[str, Any]) -> Optional[str]:
    lat, lng = data.get("latitude"), data.get("longitude")
    if _present(lat) and _present(lng):
        return f"{GOOGLE_MAPS_DIRECTIONS}{lat},{lng}"
    address = _text(data, "address")
    if address:
        return GOOGLE_MAPS_DIRECTIONS + content_encoder.encode_component(address)
    return None


def dispatch_menu_action(action: QrAction) -> MenuDispatchResult:
    kind = action.kind
    data = action.action_data or {}

    if kind is MenuActionKind.CALL:
        phone = _text(data, "phone")
        if not phone:
            return Failure(FailureKind.MISSING_FIELD)
        return ImmediateAction("tel", content_encoder.build_tel(phone))

    if kind is MenuActionKind.WEBSITE:
        url = _text(data, "url")
        if not url:
            return Failure(FailureKind.MISSING_FIELD)
        return ImmediateAction("website", normalize_url(url), new_context=True)

    if kind is MenuActionKind.WHATSAPP:
        digits = re.sub(r"\D", "", _text(data, "phone"))
        if not digits:
            return Failure(FailureKind.MISSING_FIELD)
        uri = f"{WHATSAPP_BASE}{digits}"
        message = _text(data, "message")
        if message:
            uri += f"?text={content_encoder.encode_component(message)}"
        return ImmediateAction("whatsapp", uri, new_context=True)

    if kind is MenuActionKind.DIRECTIONS:
        uri = _directions_uri(data)
        if not uri:
            return Failure(FailureKind.INVALID_LOCATION)
        return ImmediateAction("directions", uri, new_context=True)

    if kind is MenuActionKind.VCARD:
        filename = f"{_text(data, 'firstName') or 'contact'}.vcf"
        return ContentDelivery(
            content_type="vcard",
            content=content_encoder.build_vcard(data),
            media_type="text/vcard",
            filename=filename,
        )

    return Failure(FailureKind.UNKNOWN_ACTION)


def describe_menu_action(action: QrAction) -> Tuple[str, str]:
    """(Titel, Untertitel) für einen Menüeintrag."""
    kind = action.kind
    data = action.action_data or {}
    if kind is None:
        return action.action_type or "Action", ""

    if kind in (MenuActionKind.CALL, MenuActionKind.WHATSAPP):
        subtitle = _text(data, "phone")
    elif kind is MenuActionKind.WEBSITE:
        subtitle = _text(data, "url")
    elif kind is MenuActionKind.DIRECTIONS:
        subtitle = _text(data, "address")
        if not subtitle:
            try:
                subtitle = content_encoder.format_coordinates(float(data["latitude"]), float(data["longitude"]))
            except (KeyError, TypeError, ValueError):
                subtitle = "Open in Maps"
    else:
        subtitle = f"{_text(data, 'firstName')} {_text(data, 'lastName')}".strip()
    return MENU_LABELS[kind], subtitle
