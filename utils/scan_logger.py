# utils/scan_logger.py
# =============================================================================
# 📊 Scan-Logging (best effort, losgelöst vom Redirect)
# -----------------------------------------------------------------------------
# - Geräteklasse per User-Agent
# - grobe Geodaten (Kontext oder GeoLookup, sonst "Unknown")
# - ein ScanLogEntry + atomarer Scan-Zähler
# Kein Fehler verlässt log(); der Redirect wartet nie auf diesen Pfad.
# =============================================================================

from __future__ import annotations

import atexit
import logging
import os
import re
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

from utils.geo_lookup import GeoLookup
from utils.qr_store import QrStore
from utils.qr_types import UNKNOWN, UNKNOWN_LOCATION, LocationData, ScanContext, ScanLogEntry

logger = logging.getLogger(__name__)

MOBILE_UA_RE = re.compile(r"Mobile|Android|iPhone|iPad")

# spawn(fn, *args) – z. B. BackgroundTasks.add_task oder executor.submit
Spawner = Callable[..., Any]

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def classify_device(user_agent: Optional[str]) -> str:
    return "mobile" if MOBILE_UA_RE.search(user_agent or "") else "desktop"


def _shutdown_executor() -> None:
    if _executor is not None:
        _executor.shutdown(wait=False)


def background_spawner() -> Spawner:
    """Gemeinsamer Thread-Pool für Scan-Logs außerhalb eines HTTP-Requests."""
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=int(os.getenv("SCAN_LOG_WORKERS", "4")),
                thread_name_prefix="scan-log",
            )
            atexit.register(_shutdown_executor)
    return _executor.submit


class ScanLogger:
    def __init__(self, store: QrStore, geo_lookup: Optional[GeoLookup] = None) -> None:
        self.store = store
        self.geo_lookup = geo_lookup

    def _resolve_location(self, context: ScanContext) -> LocationData:
        if context.location is not None and context.location.country not in ("", UNKNOWN):
            return context.location
        if self.geo_lookup is None:
            return UNKNOWN_LOCATION
        try:
            return self.geo_lookup.lookup(context.ip_address)
        except Exception:
            logger.warning("⚠️ Geo-Lookup abgebrochen – verwende 'Unknown'", exc_info=True)
            return UNKNOWN_LOCATION

    def log(self, qr_id: str, context: ScanContext) -> None:
        """Schreibt einen Scan; alle Fehler werden geloggt und verworfen."""
        try:
            location = self._resolve_location(context)
            entry = ScanLogEntry(
                qr_code_id=qr_id,
                device_type=classify_device(context.user_agent),
                user_agent=(context.user_agent or None),
                referrer=context.referrer or None,
                country=location.country or UNKNOWN,
                city=location.city or UNKNOWN,
                ip_address=context.ip_address,
            )
            self.store.insert_scan_log(entry)
        except Exception:
            logger.exception(f"❌ Scan-Log für QR {qr_id} konnte nicht geschrieben werden")

        try:
            self.store.increment_scan_count(qr_id)
        except Exception:
            logger.exception(f"❌ Scan-Zähler für QR {qr_id} konnte nicht erhöht werden")

    def log_detached(self, qr_id: str, context: ScanContext, spawn: Optional[Spawner] = None) -> None:
        """Startet log() im Hintergrund und kehrt sofort zurück."""
        try:
            (spawn or background_spawner())(self.log, qr_id, context)
        except Exception:
            logger.exception(f"❌ Scan-Log für QR {qr_id} konnte nicht gestartet werden")
