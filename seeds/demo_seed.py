# =============================================================================
# 🌍 seeds/demo_seed.py
# -----------------------------------------------------------------------------
# Legt je QR-Typ einen Demo-Code an, damit /qr/demo-<typ> lokal
# sofort ausprobiert werden kann. Bereits vorhandene IDs bleiben unverändert.
# =============================================================================

from sqlalchemy.exc import SQLAlchemyError

from database import SessionLocal
from models import QRAction, QRCode
from utils.content_encoder import build_event, build_vcard

DEMO_CODES = [
    {"id": "demo-static", "qr_type": "static", "title": "Static", "destination_url": "example.com"},
    {"id": "demo-dynamic", "qr_type": "dynamic", "title": "Dynamic", "destination_url": "https://example.org"},
    {
        "id": "demo-multi-url",
        "qr_type": "multi-url",
        "title": "A/B Landingpage",
        "multi_urls": [
            {"url": "https://example.com/a", "weight": 70},
            {"url": "https://example.com/b", "weight": 30},
        ],
    },
    {
        "id": "demo-action",
        "qr_type": "action",
        "title": "Support anrufen",
        "action_type": "phone",
        "action_data": {"phone": "+49301234567"},
    },
    {
        "id": "demo-geo",
        "qr_type": "geo",
        "title": "Brandenburger Tor",
        "geo_data": {"latitude": 52.5163, "longitude": 13.3777},
    },
    {
        "id": "demo-vcard",
        "qr_type": "vcard",
        "title": "Visitenkarte",
        "destination_url": build_vcard(
            {"firstName": "Erika", "lastName": "Mustermann", "phone": "+49301234567", "email": "erika@example.com"}
        ),
    },
    {
        "id": "demo-event",
        "qr_type": "event",
        "title": "Launch-Party",
        "destination_url": build_event(
            {"title": "Launch-Party", "location": "Berlin", "startDate": "2026-12-01T18:00:00Z"}
        ),
    },
    {"id": "demo-text", "qr_type": "text", "title": "Hinweis", "destination_url": "WLAN-Passwort: qrcanvas"},
    {"id": "demo-menu", "qr_type": "multi-action", "title": "Café Nord", "description": "Schön, dass du da bist!"},
]

DEMO_MENU_ACTIONS = [
    {"action_type": "call", "action_data": {"phone": "+49301234567"}},
    {"action_type": "website", "action_data": {"url": "example.com"}},
    {"action_type": "whatsapp", "action_data": {"phone": "+49 151 2345678", "message": "Hallo!"}},
    {"action_type": "directions", "action_data": {"address": "Alexanderplatz, Berlin"}},
    {"action_type": "vcard", "action_data": {"firstName": "Erika", "lastName": "Mustermann"}},
]


def seed_demo_codes() -> None:
    """Erstellt Demo-QR-Codes, falls sie noch nicht existieren."""
    db = SessionLocal()
    try:
        for data in DEMO_CODES:
            if db.get(QRCode, data["id"]):
                print(f"  ✔️ {data['id']} bereits vorhanden.")
                continue
            db.add(QRCode(**data))
            print(f"  ➕ {data['id']} hinzugefügt.")

        db.flush()
        if not db.query(QRAction).filter(QRAction.qr_code_id == "demo-menu").count():
            for order, action in enumerate(DEMO_MENU_ACTIONS):
                db.add(QRAction(qr_code_id="demo-menu", display_order=order, **action))

        db.commit()
        print("✅ Demo-Daten erfolgreich angelegt.")
    except SQLAlchemyError as e:
        db.rollback()
        print(f"❌ Fehler beim Anlegen der Demo-Daten: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo_codes()
