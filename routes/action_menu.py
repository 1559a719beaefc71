# routes/action_menu.py
# =============================================================================
# 🧭 Multi-Action-Menü (QR Canvas)
# -----------------------------------------------------------------------------
#   GET /menu/{qr_id}                         → Menü anzeigen (zählt als Scan)
#   GET /menu/{qr_id}/actions/{action_id}     → ein Tipp im Menü
# =============================================================================

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import Response

from routes.qr_resolve import get_scan_logger
from routes.utils import ResponseNavigator, build_scan_context
from utils.action_dispatch import dispatch_menu_action
from utils.navigation import perform
from utils.outcomes import Failure, FailureKind
from utils.qr_store import QrStore, QrStoreError, get_store
from utils.qr_types import QrRecord, QrType
from utils.redirect_resolver import RedirectResolver
from utils.scan_logger import ScanLogger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menu", tags=["Action Menu"])


def _menu_record(store: QrStore, qr_id: str) -> Optional[QrRecord]:
    record = store.get_qr_record(qr_id)
    if record is None or not record.is_active or record.kind is not QrType.MULTI_ACTION:
        return None
    return record


@router.get("/{qr_id}", response_model=None)
def show_menu(
    qr_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    store: QrStore = Depends(get_store),
    scan_logger: ScanLogger = Depends(get_scan_logger),
) -> Response:
    """Zeigt das Aktionsmenü; nur für aktive Multi-Action-Codes."""
    navigator = ResponseNavigator(request)
    try:
        if _menu_record(store, qr_id) is None:
            perform(Failure(FailureKind.NOT_FOUND_OR_INACTIVE), navigator)
        else:
            resolver = RedirectResolver(store, scan_logger, spawn=background_tasks.add_task)
            perform(resolver.resolve(qr_id, build_scan_context(request)), navigator)
    except QrStoreError:
        logger.exception(f"❌ Menü für QR {qr_id} konnte nicht geladen werden")
        return navigator.unavailable()

    return navigator.finish()


@router.get("/{qr_id}/actions/{action_id}", response_model=None)
def run_action(
    qr_id: str,
    action_id: str,
    request: Request,
    store: QrStore = Depends(get_store),
) -> Response:
    """Führt eine Menü-Aktion aus (kein weiterer Scan-Log)."""
    navigator = ResponseNavigator(request)
    try:
        if _menu_record(store, qr_id) is None:
            perform(Failure(FailureKind.NOT_FOUND_OR_INACTIVE), navigator)
        else:
            action = next((a for a in store.get_qr_actions(qr_id) if a.id == action_id), None)
            if action is None:
                perform(Failure(FailureKind.NOT_FOUND_OR_INACTIVE), navigator)
            else:
                perform(dispatch_menu_action(action), navigator)
    except QrStoreError:
        logger.exception(f"❌ Aktion {action_id} für QR {qr_id} fehlgeschlagen")
        return navigator.unavailable()

    return navigator.finish()
