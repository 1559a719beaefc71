# =============================================================================
# 📦 models/__init__.py
# -----------------------------------------------------------------------------
# Minimal & korrekt für Alembic
# =============================================================================

from .qrcode import QRCode
from .qr_action import QRAction
from .qr_scan import QRScanLog

__all__ = [
    "QRCode",
    "QRAction",
    "QRScanLog",
]
