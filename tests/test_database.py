from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
import pytest

# Models registrieren ihre Tabellen an Base.metadata
import models  # noqa: F401
from database import Base

REQUIRED_TABLES = ["qr_codes", "qr_actions", "qr_scan_logs"]


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    yield engine
    engine.dispose()


def test_database_connection(engine):
    """Überprüft, ob eine Verbindung zur Datenbank besteht."""
    try:
        with engine.connect() as conn:
            result = conn.execute(text("SELECT 1"))
            assert result.scalar() == 1
    except OperationalError as e:
        pytest.fail(f"❌ Datenbankverbindung fehlgeschlagen: {e}")


def test_required_tables_exist(engine):
    """Legt alle Tabellen an und prüft, ob die Resolver-Tabellen vorhanden sind."""
    Base.metadata.create_all(engine)

    tables = inspect(engine).get_table_names()
    missing = [t for t in REQUIRED_TABLES if t not in tables]
    assert not missing, f"❌ Fehlende Tabellen: {missing}"


def test_scan_log_columns(engine):
    Base.metadata.create_all(engine)
    columns = {c["name"] for c in inspect(engine).get_columns("qr_scan_logs")}
    assert {
        "qr_code_id", "device_type", "user_agent", "referrer",
        "country", "city", "ip_address", "scanned_at",
    } <= columns
