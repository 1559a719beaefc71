# =============================================================================
# 🔄 QR-Code-Resolver (QR Canvas)
# -----------------------------------------------------------------------------
# Eine einzige Route:
#       GET /qr/{qr_id}
#
# Static / Dynamic / Multi-URL / Action / Geo / Multi-Action / vCard / Event /
# Text – die Entscheidung trifft utils/redirect_resolver.py, diese Route
# baut nur Kontext und Response. Der Scan-Log läuft als BackgroundTask
# nach dem Senden der Antwort.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import Response

from routes.utils import ResponseNavigator, build_scan_context, get_geo_lookup
from utils.geo_lookup import GeoLookup
from utils.navigation import perform
from utils.qr_store import QrStore, QrStoreError, get_store
from utils.redirect_resolver import RedirectResolver
from utils.scan_logger import ScanLogger

logger = logging.getLogger(__name__)

router = APIRouter(tags=["QR-Resolver"])


def get_scan_logger(
    store: QrStore = Depends(get_store),
    geo_lookup: GeoLookup = Depends(get_geo_lookup),
) -> ScanLogger:
    return ScanLogger(store, geo_lookup)


# =============================================================================
# ✅ EINZIGER Resolver für ALLE QR-Codes
# =============================================================================
@router.get("/qr/{qr_id}", response_model=None)
def resolve(
    qr_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    store: QrStore = Depends(get_store),
    scan_logger: ScanLogger = Depends(get_scan_logger),
) -> Response:
    """
    Zentraler Resolver.
    Entscheidet anhand des QR-Typs, wohin der Scanner geschickt wird.
    """
    resolver = RedirectResolver(store, scan_logger, spawn=background_tasks.add_task)
    navigator = ResponseNavigator(request)

    try:
        outcome = resolver.resolve(qr_id, build_scan_context(request))
    except QrStoreError:
        logger.exception(f"❌ QR {qr_id} konnte nicht aufgelöst werden")
        return navigator.unavailable()

    perform(outcome, navigator)
    return navigator.finish()
