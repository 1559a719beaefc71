# =============================================================================
# 🗄️ database.py
# -----------------------------------------------------------------------------
# SQLAlchemy-Datenbankkonfiguration für QR Canvas
# Unterstützt SQLite (lokal/Tests) + PostgreSQL/MySQL über DATABASE_URL + .env
# =============================================================================

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

# 🔹 .env laden (z. B. aus .env-Datei im Projektverzeichnis)
load_dotenv()

# 🔹 Verbindungs-URL aus Umgebungsvariablen
SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./qr_canvas.db")

# 🔹 SQLite braucht check_same_thread=False, weil Scan-Logs im Hintergrund-Thread landen
connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

# 🔹 Engine erstellen
# pool_pre_ping = erkennt automatisch unterbrochene Verbindungen
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
)

# 🔹 SessionFactory – erzeugt Session für jede Anfrage bzw. jeden Scan-Log
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# 🔹 Basisklasse für alle SQLAlchemy-Modelle
Base = declarative_base()
