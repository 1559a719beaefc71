# =============================================================================
# 🧭 models/qr_action.py
# -----------------------------------------------------------------------------
# Ein Eintrag im Aktionsmenü eines Multi-Action-QR-Codes
# (Anrufen, Website, WhatsApp, Route, Kontakt speichern).
# =============================================================================

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base
from utils.qr_types import QrAction


class QRAction(Base):
    __tablename__ = "qr_actions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)
    qr_code_id: Mapped[str] = mapped_column(
        ForeignKey("qr_codes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    action_type: Mapped[str] = mapped_column(String(30), nullable=False)  # call, website, whatsapp, ...
    action_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    qr = relationship("QRCode", back_populates="actions")

    def to_action(self) -> QrAction:
        return QrAction.from_row(
            {
                "id": self.id,
                "qr_code_id": self.qr_code_id,
                "action_type": self.action_type,
                "action_data": self.action_data,
                "display_order": self.display_order,
                "is_active": self.is_active,
            }
        )

    def __repr__(self) -> str:
        return (
            f"<QRAction(id='{self.id}', qr='{self.qr_code_id}', "
            f"type='{self.action_type}', order={self.display_order})>"
        )
