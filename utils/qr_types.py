"""
utils/qr_types.py
────────────────────────────────────────────
Gemeinsame Typen der Resolver-Engine.
- Enums für die Dispatch-Achsen (QR-Typ, Aktionstyp, Menü-Aktion)
- Unveränderliche Datensätze, wie der Store sie liefert
- Scan-Kontext einer einzelnen Auflösung
────────────────────────────────────────────
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


UNKNOWN = "Unknown"


class QrType(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"
    MULTI_URL = "multi-url"
    ACTION = "action"
    GEO = "geo"
    MULTI_ACTION = "multi-action"
    VCARD = "vcard"
    TEXT = "text"
    EVENT = "event"
    # Unbekannte / zukünftige Werte aus der Datenbank
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "QrType":
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.UNKNOWN


class ActionKind(str, Enum):
    """Aktionstypen eines QR-Codes vom Typ ``action``."""

    EMAIL = "email"
    PHONE = "phone"
    SMS = "sms"

    @classmethod
    def parse(cls, value: Any) -> Optional["ActionKind"]:
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return None


class MenuActionKind(str, Enum):
    """Einträge eines Multi-Action-Menüs."""

    CALL = "call"
    WEBSITE = "website"
    WHATSAPP = "whatsapp"
    DIRECTIONS = "directions"
    VCARD = "vcard"

    @classmethod
    def parse(cls, value: Any) -> Optional["MenuActionKind"]:
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return None


def _json_value(value: Any) -> Any:
    # Supabase/ältere Zeilen liefern JSON-Spalten teilweise als String
    if isinstance(value, str):
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return None
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    value = _json_value(value)
    return dict(value) if isinstance(value, dict) else {}


@dataclass(frozen=True)
class QrRecord:
    id: str
    qr_type: str
    is_active: bool
    title: str = ""
    description: Optional[str] = None
    destination_url: Optional[str] = None
    multi_urls: Tuple[Dict[str, Any], ...] = ()
    action_type: Optional[str] = None
    action_data: Dict[str, Any] = field(default_factory=dict)
    geo_data: Dict[str, Any] = field(default_factory=dict)
    scan_count: int = 0

    @property
    def kind(self) -> QrType:
        return QrType.parse(self.qr_type)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "QrRecord":
        """Baut einen Datensatz aus einer Tabellenzeile (Supabase oder ORM)."""
        multi_urls = _json_value(row.get("multi_urls"))
        if not isinstance(multi_urls, list):
            multi_urls = []
        return cls(
            id=str(row["id"]),
            qr_type=str(row.get("qr_type") or ""),
            is_active=bool(row.get("is_active")),
            title=row.get("title") or "",
            description=row.get("description"),
            destination_url=row.get("destination_url"),
            multi_urls=tuple(item for item in multi_urls if isinstance(item, dict)),
            action_type=row.get("action_type"),
            action_data=_as_dict(row.get("action_data")),
            geo_data=_as_dict(row.get("geo_data")),
            scan_count=int(row.get("scan_count") or 0),
        )


@dataclass(frozen=True)
class QrAction:
    id: str
    qr_code_id: str
    action_type: str
    action_data: Dict[str, Any] = field(default_factory=dict)
    display_order: int = 0
    is_active: bool = True

    @property
    def kind(self) -> Optional[MenuActionKind]:
        return MenuActionKind.parse(self.action_type)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "QrAction":
        return cls(
            id=str(row["id"]),
            qr_code_id=str(row.get("qr_code_id") or ""),
            action_type=str(row.get("action_type") or ""),
            action_data=_as_dict(row.get("action_data")),
            display_order=int(row.get("display_order") or 0),
            is_active=bool(row.get("is_active", True)),
        )


@dataclass(frozen=True)
class LocationData:
    country: str = UNKNOWN
    city: str = UNKNOWN
    latitude: Optional[float] = None
    longitude: Optional[float] = None


UNKNOWN_LOCATION = LocationData()


@dataclass(frozen=True)
class ScanContext:
    user_agent: str = ""
    referrer: Optional[str] = None
    ip_address: Optional[str] = None
    location: Optional[LocationData] = None


@dataclass(frozen=True)
class ScanLogEntry:
    qr_code_id: str
    device_type: str
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    ip_address: Optional[str] = None
    # None → der Store vergibt den Zeitstempel
    scanned_at: Optional[datetime] = None

    def as_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "qr_code_id": self.qr_code_id,
            "device_type": self.device_type,
            "user_agent": self.user_agent,
            "referrer": self.referrer,
            "country": self.country,
            "city": self.city,
            "ip_address": self.ip_address,
        }
        if self.scanned_at is not None:
            row["scanned_at"] = self.scanned_at.isoformat()
        return row


def sort_actions(actions: List[QrAction]) -> List[QrAction]:
    """Nur aktive Aktionen, aufsteigend nach display_order (stabil)."""
    return sorted((a for a in actions if a.is_active), key=lambda a: a.display_order)
