"""
utils/outcomes.py
────────────────────────────────────────────
Ergebnisse einer QR-Auflösung.
Der Resolver entscheidet nur; ausgeführt wird das Ergebnis
über einen Navigator (siehe utils/navigation.py).
────────────────────────────────────────────
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from utils.qr_types import QrAction, QrRecord


class FailureKind(str, Enum):
    NOT_FOUND_OR_INACTIVE = "not_found_or_inactive"
    NO_DESTINATION = "no_destination"
    INVALID_LOCATION = "invalid_location"
    UNKNOWN_ACTION = "unknown_action"
    MISSING_FIELD = "missing_field"


FAILURE_MESSAGES = {
    FailureKind.NOT_FOUND_OR_INACTIVE: "QR code not found or inactive",
    FailureKind.NO_DESTINATION: "QR code not found or inactive",
    FailureKind.INVALID_LOCATION: "Invalid location data",
    FailureKind.UNKNOWN_ACTION: "Unknown action type",
    FailureKind.MISSING_FIELD: "This QR code is missing required information",
}


_SCHEME_RE = re.compile(r"^https?://")


def normalize_url(url: str) -> str:
    """Sorgt dafür, dass eine URL mit http:// oder https:// beginnt."""
    if not url:
        return ""
    url = url.strip()
    if not _SCHEME_RE.match(url):
        url = "https://" + url
    return url


@dataclass(frozen=True)
class Redirect:
    url: str

    @classmethod
    def to(cls, url: str) -> "Redirect":
        return cls(normalize_url(url))


@dataclass(frozen=True)
class ActionMenu:
    record: QrRecord
    actions: Tuple[QrAction, ...]


@dataclass(frozen=True)
class ImmediateAction:
    # mailto / tel / sms / website / whatsapp / directions
    kind: str
    uri: str
    # True → in neuem Browser-Kontext öffnen statt die Seite zu ersetzen
    new_context: bool = False


@dataclass(frozen=True)
class ContentDelivery:
    content_type: str
    content: str
    media_type: str = "text/plain"
    # None → Inhalt anzeigen statt herunterladen
    filename: str | None = None


@dataclass(frozen=True)
class Failure:
    kind: FailureKind

    @property
    def message(self) -> str:
        return FAILURE_MESSAGES[self.kind]


ResolutionOutcome = Union[Redirect, ActionMenu, ImmediateAction, ContentDelivery, Failure]
