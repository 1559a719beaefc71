# =============================================================================
# 📊 models/qr_scan.py
# -----------------------------------------------------------------------------
# Enthält das SQLAlchemy-Modell für QR-Code-Scans.
# Jeder Datensatz entspricht einem einzelnen Scan (Gerät, Referrer, Standort).
# Nur anhängen – Scan-Logs werden nie geändert oder gelöscht.
# =============================================================================

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid
from database import Base


def utc_now():
    """Gibt aktuelle UTC-Zeit (timezone-aware, Python 3.12-kompatibel) zurück."""
    return datetime.now(timezone.utc)


class QRScanLog(Base):
    __tablename__ = "qr_scan_logs"

    # ---------------------------------------------------------------------
    # 🔹 Primär- & Fremdschlüssel
    # ---------------------------------------------------------------------
    id = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)
    qr_code_id = Column(String(36), ForeignKey("qr_codes.id", ondelete="CASCADE"), nullable=False, index=True)

    # ---------------------------------------------------------------------
    # 🔹 Scan-Informationen
    # ---------------------------------------------------------------------
    device_type = Column(String(20), nullable=True)    # "mobile" | "desktop"
    referrer = Column(String(2048), nullable=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)

    # ---------------------------------------------------------------------
    # 🔹 Zeitstempel (UTC-aware, serverseitig vergeben)
    # ---------------------------------------------------------------------
    scanned_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)

    # ---------------------------------------------------------------------
    # 🔹 Beziehungen
    # ---------------------------------------------------------------------
    qr = relationship("QRCode", back_populates="scan_logs")

    # ---------------------------------------------------------------------
    # 🔹 Repräsentation (Debugging / Logs)
    # ---------------------------------------------------------------------
    def __repr__(self):
        return (
            f"<QRScanLog(id={self.id}, qr_code_id={self.qr_code_id}, device='{self.device_type}', "
            f"country='{self.country}', scanned_at={self.scanned_at})>"
        )
