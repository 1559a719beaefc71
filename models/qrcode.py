# =============================================================================
# 📦 QRCode Model – gespeicherte QR-Konfiguration (SQLAlchemy 2.0)
# =============================================================================

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional, TYPE_CHECKING

from sqlalchemy import (
    String, Text, Boolean, Integer, DateTime, JSON,
    func, event
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from database import Base
from utils.qr_types import QrRecord

if TYPE_CHECKING:
    from models.qr_action import QRAction
    from models.qr_scan import QRScanLog


def new_qr_id() -> str:
    return uuid.uuid4().hex


# =============================================================================
# 🧩 QRCode-Datenmodell
# =============================================================================
class QRCode(Base):
    """
    Zentrales QR-Code Modell.
    Der Typ ('qr_type') entscheidet, welche der Payload-Spalten der
    Resolver liest: destination_url, multi_urls, action_*, geo_data.
    """
    __tablename__ = "qr_codes"

    # ---------------------------------------------------------------------
    # 🧾 Basisattribute
    # ---------------------------------------------------------------------
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_qr_id)
    user_id: Mapped[Optional[str]] = mapped_column(String(36), index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[Optional[str]] = mapped_column(Text)
    qr_type: Mapped[str] = mapped_column(String(30), nullable=False)  # static, dynamic, multi-url, ...
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # ---------------------------------------------------------------------
    # 📄 Typ-spezifische Inhalte
    # ---------------------------------------------------------------------
    destination_url: Mapped[Optional[str]] = mapped_column(Text)
    multi_urls: Mapped[Optional[list[Any]]] = mapped_column(JSON)
    action_type: Mapped[Optional[str]] = mapped_column(String(30))
    action_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    geo_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)

    # Nur über UPDATE ... SET scan_count = scan_count + 1 verändern
    scan_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ---------------------------------------------------------------------
    # 🔗 Beziehungen
    # ---------------------------------------------------------------------
    actions: Mapped[list["QRAction"]] = relationship(
        "QRAction",
        back_populates="qr",
        cascade="all, delete-orphan",
        order_by="QRAction.display_order",
    )
    scan_logs: Mapped[list["QRScanLog"]] = relationship(
        "QRScanLog",
        back_populates="qr",
        cascade="all, delete-orphan",
    )

    # ---------------------------------------------------------------------
    # 🕒 Zeitstempel
    # ---------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    def to_record(self) -> QrRecord:
        return QrRecord.from_row(
            {
                "id": self.id,
                "qr_type": self.qr_type,
                "is_active": self.is_active,
                "title": self.title,
                "description": self.description,
                "destination_url": self.destination_url,
                "multi_urls": self.multi_urls,
                "action_type": self.action_type,
                "action_data": self.action_data,
                "geo_data": self.geo_data,
                "scan_count": self.scan_count,
            }
        )

    # ---------------------------------------------------------------------
    # 📌 Repräsentation
    # ---------------------------------------------------------------------
    def __repr__(self) -> str:
        return (
            f"<QRCode(id='{self.id}', type='{self.qr_type}', "
            f"active={self.is_active}, scans={self.scan_count})>"
        )


# =============================================================================
# ⚙️ Event: Automatische ID-Erzeugung
# =============================================================================

from sqlalchemy.orm import Mapper
from sqlalchemy.engine import Connection


@event.listens_for(QRCode, "before_insert")  # type: ignore[misc]
def set_qr_id(mapper: Mapper, connection: Connection, target: Any) -> None:
    """
    Garantiert, dass jeder QR-Code eine eindeutige, unveränderliche ID erhält.
    """
    if not getattr(target, "id", None):
        target.id = new_qr_id()
