# =============================================================================
# 🚀 QR Canvas – Hauptapplikation (main.py)
# =============================================================================

from __future__ import annotations
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import Response

from dotenv import load_dotenv
from typing import Dict

# -------------------------------------------------------------------------
# 1️⃣ .env laden (muss ganz oben sein!)
# -------------------------------------------------------------------------
env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("qr_canvas")

# -------------------------------------------------------------------------
# 2️⃣ FastAPI App
# -------------------------------------------------------------------------
app = FastAPI(title="QR Canvas", version="1.0")

# -------------------------------------------------------------------------
# 3️⃣ Routen laden
# -------------------------------------------------------------------------
from routes import qr_resolve   # für /qr/<id>
from routes import action_menu  # für /menu/<id>

# zentraler Resolver
app.include_router(qr_resolve.router)
app.include_router(action_menu.router)

# -------------------------------------------------------------------------
# 4️⃣ Health-Check
# -------------------------------------------------------------------------
@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}

# -------------------------------------------------------------------------
# 5️⃣ Chrome DevTools Well-Known Probe (noise-free logs)
# -------------------------------------------------------------------------
@app.get("/.well-known/appspecific/com.chrome.devtools.json", include_in_schema=False)
def chrome_devtools_probe() -> Response:
    # Chrome probes this endpoint locally; 204 avoids noisy 404 logs.
    return Response(status_code=204)


logger.info("🚀 QR Canvas gestartet")
