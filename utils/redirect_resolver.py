# =============================================================================
# 🔄 QR-Resolver (QR Canvas)
# -----------------------------------------------------------------------------
# Ablauf pro Scan (genau einmal, keine Wiederholung):
#   Lookup → Failure | (Scan-Log starten + Dispatch) → Ergebnis
#
# Der Scan-Log läuft losgelöst; die Entscheidung hängt nie von ihm ab.
# =============================================================================

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional
from urllib.parse import quote

from utils import action_dispatch
from utils.multi_url import select_url
from utils.outcomes import (
    ActionMenu,
    ContentDelivery,
    Failure,
    FailureKind,
    Redirect,
    ResolutionOutcome,
)
from utils.qr_store import QrStore
from utils.qr_types import QrRecord, QrType, ScanContext, sort_actions
from utils.scan_logger import ScanLogger, Spawner

logger = logging.getLogger(__name__)

GOOGLE_MAPS_SEARCH = "https://www.google.com/maps/search/?api=1&query="

# Inhaltstypen, die Text statt einer Weiterleitung kodieren:
# (media_type, Dateiname oder None = anzeigen)
CONTENT_TYPES: Dict[QrType, tuple[str, Optional[str]]] = {
    QrType.VCARD: ("text/vcard", "contact.vcf"),
    QrType.EVENT: ("text/calendar", "event.ics"),
    QrType.TEXT: ("text/plain", None),
}


def _coordinate(value: object, limit: float) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not -limit <= number <= limit:
        return None
    return number


def build_maps_search_url(geo_data: Dict[str, object]) -> Optional[str]:
    """Adresse (URL-kodiert) vor Koordinaten; beides fehlt → None."""
    address = str(geo_data.get("address") or "").strip()
    if address:
        return GOOGLE_MAPS_SEARCH + quote(address, safe="")

    lat = _coordinate(geo_data.get("latitude"), 90)
    lng = _coordinate(geo_data.get("longitude"), 180)
    if lat is None or lng is None:
        return None
    return f"{GOOGLE_MAPS_SEARCH}{lat},{lng}"


class RedirectResolver:
    def __init__(
        self,
        store: QrStore,
        scan_logger: Optional[ScanLogger] = None,
        spawn: Optional[Spawner] = None,
        select: Callable[..., Optional[str]] = select_url,
    ) -> None:
        self.store = store
        self.scan_logger = scan_logger
        self.spawn = spawn
        self.select = select
        self._handlers: Dict[QrType, Callable[[QrRecord], ResolutionOutcome]] = {
            QrType.STATIC: self._resolve_direct,
            QrType.DYNAMIC: self._resolve_direct,
            QrType.MULTI_URL: self._resolve_multi_url,
            QrType.ACTION: self._resolve_action,
            QrType.GEO: self._resolve_geo,
            QrType.MULTI_ACTION: self._resolve_menu,
            QrType.VCARD: self._resolve_content,
            QrType.EVENT: self._resolve_content,
            QrType.TEXT: self._resolve_content,
            # Unbekannte Typen: destination_url als direktes Ziel
            QrType.UNKNOWN: self._resolve_direct,
        }

    # ---------------------------------------------------------------------
    # 🔍 Einstieg
    # ---------------------------------------------------------------------
    def resolve(self, qr_id: str, context: Optional[ScanContext] = None) -> ResolutionOutcome:
        """
        Löst einen QR-Code auf.
        QrStoreError beim Lesen wird an den Aufrufer weitergegeben.
        """
        context = context or ScanContext()
        qr_id = (qr_id or "").strip()
        if not qr_id:
            return Failure(FailureKind.NOT_FOUND_OR_INACTIVE)

        record = self.store.get_qr_record(qr_id)
        if record is None or not record.is_active:
            logger.info(f"🚫 QR {qr_id} nicht gefunden oder inaktiv")
            return Failure(FailureKind.NOT_FOUND_OR_INACTIVE)

        if self.scan_logger is not None:
            self.scan_logger.log_detached(record.id, context, spawn=self.spawn)

        kind = record.kind
        if kind is QrType.UNKNOWN:
            logger.warning(f"⚠️ Unbekannter QR-Typ '{record.qr_type}' (QR {record.id}) – direkte Weiterleitung")
        outcome = self._handlers[kind](record)
        logger.info(f"✅ QR {record.id} ({kind.value}) → {type(outcome).__name__}")
        return outcome

    # ---------------------------------------------------------------------
    # 🧭 Handler je Typ
    # ---------------------------------------------------------------------
    def _resolve_direct(self, record: QrRecord) -> ResolutionOutcome:
        url = (record.destination_url or "").strip()
        if not url:
            return Failure(FailureKind.NO_DESTINATION)
        return Redirect.to(url)

    def _resolve_multi_url(self, record: QrRecord) -> ResolutionOutcome:
        url = self.select(record.multi_urls)
        if not url:
            return Failure(FailureKind.NO_DESTINATION)
        return Redirect.to(url)

    def _resolve_action(self, record: QrRecord) -> ResolutionOutcome:
        return action_dispatch.dispatch(record.action_type, record.action_data)

    def _resolve_geo(self, record: QrRecord) -> ResolutionOutcome:
        url = build_maps_search_url(record.geo_data)
        if not url:
            return Failure(FailureKind.INVALID_LOCATION)
        return Redirect.to(url)

    def _resolve_menu(self, record: QrRecord) -> ResolutionOutcome:
        actions = sort_actions(self.store.get_qr_actions(record.id))
        return ActionMenu(record=record, actions=tuple(actions))

    def _resolve_content(self, record: QrRecord) -> ResolutionOutcome:
        content = record.destination_url or ""
        if not content.strip():
            return Failure(FailureKind.NO_DESTINATION)
        media_type, filename = CONTENT_TYPES[record.kind]
        return ContentDelivery(
            content_type=record.kind.value,
            content=content,
            media_type=media_type,
            filename=filename,
        )
