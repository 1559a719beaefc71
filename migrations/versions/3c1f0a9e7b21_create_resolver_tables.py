"""Create qr_codes, qr_actions and qr_scan_logs

Revision ID: 3c1f0a9e7b21
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision: str = "3c1f0a9e7b21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# ─────────────────────────────────────────────
# ✅ UPGRADE
# ─────────────────────────────────────────────
def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "qr_codes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("qr_type", sa.String(length=30), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("destination_url", sa.Text(), nullable=True),
        sa.Column("multi_urls", sa.JSON(), nullable=True),
        sa.Column("action_type", sa.String(length=30), nullable=True),
        sa.Column("action_data", sa.JSON(), nullable=True),
        sa.Column("geo_data", sa.JSON(), nullable=True),
        sa.Column("scan_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_qr_codes_user_id", "qr_codes", ["user_id"])

    op.create_table(
        "qr_actions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("qr_code_id", sa.String(length=36), nullable=False),
        sa.Column("action_type", sa.String(length=30), nullable=False),
        sa.Column("action_data", sa.JSON(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["qr_code_id"], ["qr_codes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_qr_actions_qr_code_id", "qr_actions", ["qr_code_id"])

    op.create_table(
        "qr_scan_logs",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("qr_code_id", sa.String(length=36), nullable=False),
        sa.Column("device_type", sa.String(length=20), nullable=True),
        sa.Column("referrer", sa.String(length=2048), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("scanned_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["qr_code_id"], ["qr_codes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_qr_scan_logs_qr_code_id", "qr_scan_logs", ["qr_code_id"])
    op.create_index("ix_qr_scan_logs_scanned_at", "qr_scan_logs", ["scanned_at"])


# ─────────────────────────────────────────────
# 🔙 DOWNGRADE
# ─────────────────────────────────────────────
def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_qr_scan_logs_scanned_at", table_name="qr_scan_logs")
    op.drop_index("ix_qr_scan_logs_qr_code_id", table_name="qr_scan_logs")
    op.drop_table("qr_scan_logs")
    op.drop_index("ix_qr_actions_qr_code_id", table_name="qr_actions")
    op.drop_table("qr_actions")
    op.drop_index("ix_qr_codes_user_id", table_name="qr_codes")
    op.drop_table("qr_codes")
