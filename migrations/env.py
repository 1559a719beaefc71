# =============================================================================
# ⚙️ Alembic Environment Configuration (QR Canvas)
# -----------------------------------------------------------------------------
# Lädt .env-Variablen, nutzt DATABASE_URL aus database.py und registriert
# die Resolver-Modelle (qr_codes, qr_actions, qr_scan_logs).
# =============================================================================

from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool
from dotenv import load_dotenv

# -------------------------------------------------------------------------
# 🔹 .env-Datei laden
# -------------------------------------------------------------------------
load_dotenv()

# -------------------------------------------------------------------------
# 🔹 Alembic-Konfiguration
# -------------------------------------------------------------------------
config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)

# -------------------------------------------------------------------------
# 🔹 Modelle importieren, damit Alembic sie erkennt
# -------------------------------------------------------------------------
from database import Base, SQLALCHEMY_DATABASE_URL
from models import QRCode, QRAction, QRScanLog  # noqa: F401

config.set_main_option("sqlalchemy.url", SQLALCHEMY_DATABASE_URL.replace("%", "%%"))

target_metadata = Base.metadata

# -------------------------------------------------------------------------
# 🔹 Migration im Offline-Modus
# -------------------------------------------------------------------------
def run_migrations_offline() -> None:
    """Erzeugt SQL ohne Verbindung (z. B. für Review in CI/CD)."""
    context.configure(
        url=SQLALCHEMY_DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()

# -------------------------------------------------------------------------
# 🔹 Migration im Online-Modus
# -------------------------------------------------------------------------
def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section) or {}

    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite kann ALTER TABLE nur im Batch-Modus
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

# -------------------------------------------------------------------------
# 🔹 Einstiegspunkt
# -------------------------------------------------------------------------
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
