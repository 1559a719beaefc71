"""
utils/qr_store.py
────────────────────────────────────────────
Datenzugriff der Resolver-Engine.
- QrStore: Vertrag (lesen: QR + Aktionen, schreiben: Scan-Log + Zähler)
- SqlQrStore: eigene Tabellen über SQLAlchemy (Standard)
- SupabaseQrStore: gehostete Supabase-Tabellen, falls konfiguriert
Lesefehler werden als QrStoreError weitergereicht.
────────────────────────────────────────────
"""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional, Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from models import QRAction, QRCode, QRScanLog
from utils.qr_types import QrAction, QrRecord, ScanLogEntry, sort_actions

logger = logging.getLogger(__name__)


class QrStoreError(Exception):
    """Datenquelle nicht erreichbar oder Abfrage fehlgeschlagen."""


class QrStore(Protocol):
    def get_qr_record(self, qr_id: str) -> Optional[QrRecord]:
        ...

    def get_qr_actions(self, qr_id: str) -> List[QrAction]:
        ...

    def insert_scan_log(self, entry: ScanLogEntry) -> None:
        ...

    def increment_scan_count(self, qr_id: str) -> None:
        ...


# =============================================================================
# 🗄️ SQLAlchemy
# =============================================================================
class SqlQrStore:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get_qr_record(self, qr_id: str) -> Optional[QrRecord]:
        try:
            with self.session_factory() as db:
                qr = db.get(QRCode, qr_id)
                return qr.to_record() if qr else None
        except SQLAlchemyError as exc:
            raise QrStoreError(f"QR {qr_id} konnte nicht geladen werden") from exc

    def get_qr_actions(self, qr_id: str) -> List[QrAction]:
        stmt = (
            select(QRAction)
            .where(QRAction.qr_code_id == qr_id, QRAction.is_active == True)  # noqa: E712
            .order_by(QRAction.display_order.asc(), QRAction.created_at.asc())
        )
        try:
            with self.session_factory() as db:
                return [row.to_action() for row in db.scalars(stmt)]
        except SQLAlchemyError as exc:
            raise QrStoreError(f"Aktionen für QR {qr_id} konnten nicht geladen werden") from exc

    def insert_scan_log(self, entry: ScanLogEntry) -> None:
        with self.session_factory() as db:
            try:
                log = QRScanLog(
                    qr_code_id=entry.qr_code_id,
                    device_type=entry.device_type,
                    user_agent=entry.user_agent[:512] if entry.user_agent else None,
                    referrer=entry.referrer[:2048] if entry.referrer else None,
                    country=entry.country,
                    city=entry.city,
                    ip_address=entry.ip_address,
                )
                if entry.scanned_at is not None:
                    log.scanned_at = entry.scanned_at
                db.add(log)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise QrStoreError(f"Scan-Log für QR {entry.qr_code_id} fehlgeschlagen") from exc

    def increment_scan_count(self, qr_id: str) -> None:
        # Atomar in der Datenbank, kein Lesen-Ändern-Schreiben im Client
        stmt = (
            update(QRCode)
            .where(QRCode.id == qr_id)
            .values(scan_count=QRCode.scan_count + 1)
            .execution_options(synchronize_session=False)
        )
        with self.session_factory() as db:
            try:
                db.execute(stmt)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise QrStoreError(f"Scan-Zähler für QR {qr_id} fehlgeschlagen") from exc


# =============================================================================
# ☁️ Supabase
# =============================================================================
class SupabaseQrStore:
    """Gleicher Vertrag über einen supabase-py Client."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def get_qr_record(self, qr_id: str) -> Optional[QrRecord]:
        try:
            res = self.client.table("qr_codes").select("*").eq("id", qr_id).limit(1).execute()
        except Exception as exc:
            raise QrStoreError(f"QR {qr_id} konnte nicht geladen werden") from exc
        rows = getattr(res, "data", None) or []
        return QrRecord.from_row(rows[0]) if rows else None

    def get_qr_actions(self, qr_id: str) -> List[QrAction]:
        try:
            res = (
                self.client.table("qr_actions")
                .select("*")
                .eq("qr_code_id", qr_id)
                .eq("is_active", True)
                .order("display_order")
                .execute()
            )
        except Exception as exc:
            raise QrStoreError(f"Aktionen für QR {qr_id} konnten nicht geladen werden") from exc
        rows = getattr(res, "data", None) or []
        # Sortierung/Filter zusätzlich clientseitig absichern
        return sort_actions([QrAction.from_row(row) for row in rows])

    def insert_scan_log(self, entry: ScanLogEntry) -> None:
        try:
            self.client.table("qr_scan_logs").insert(entry.as_row()).execute()
        except Exception as exc:
            raise QrStoreError(f"Scan-Log für QR {entry.qr_code_id} fehlgeschlagen") from exc

    def increment_scan_count(self, qr_id: str) -> None:
        try:
            self.client.rpc("increment_scan_count", {"qr_id": qr_id}).execute()
        except Exception as exc:
            raise QrStoreError(f"Scan-Zähler für QR {qr_id} fehlgeschlagen") from exc


# =============================================================================
# ⚙️ Auswahl per .env
# =============================================================================
_default_store: Optional[QrStore] = None


def build_store_from_env() -> QrStore:
    """Supabase, falls SUPABASE_URL + SUPABASE_KEY gesetzt sind, sonst SQLAlchemy."""
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")
    if supabase_url and supabase_key:
        from supabase import create_client

        logger.info("✅ QR-Store: Supabase")
        return SupabaseQrStore(create_client(supabase_url, supabase_key))

    from database import SessionLocal

    logger.info("ℹ️ QR-Store: SQLAlchemy (DATABASE_URL)")
    return SqlQrStore(SessionLocal)


def get_store() -> QrStore:
    """FastAPI-Dependency; in Tests über dependency_overrides ersetzt."""
    global _default_store
    if _default_store is None:
        _default_store = build_store_from_env()
    return _default_store
