# =============================================================================
# 🧩 init_db.py
# -----------------------------------------------------------------------------
# Initialisiert die Datenbank für QR Canvas:
#   - Erstellt alle Tabellen (qr_codes, qr_actions, qr_scan_logs)
#   - Optional (--demo): legt Demo-QR-Codes an
# Für produktive Datenbanken: alembic upgrade head
# =============================================================================

import sys

from database import Base, engine
import models  # noqa: F401  (registriert alle Tabellen)
from seeds.demo_seed import seed_demo_codes


def main() -> None:
    print("🛠️ Erstelle Tabellen in der Datenbank...")
    Base.metadata.create_all(bind=engine)
    print("✅ Tabellen wurden erfolgreich erstellt.\n")

    if "--demo" in sys.argv:
        print("📦 Füge Demo-QR-Codes hinzu (falls nicht vorhanden)...")
        seed_demo_codes()

    print("\n🎉 Datenbankinitialisierung abgeschlossen!")


if __name__ == "__main__":
    main()
