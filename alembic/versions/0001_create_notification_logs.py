"""Create the notification_logs table.

Revision ID: 0001
Revises: -
Create Date: 2026-10-17
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "notification_logs",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("channel", sa.String(16), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("language", sa.String(8), nullable=False, server_default="en"),
        sa.Column("recipient", sa.String(320), nullable=False),
        sa.Column("subject", sa.Text, nullable=True),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column(
            "status", sa.String(16), nullable=False, server_default="pending"
        ),
        sa.Column("attempts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("error", sa.Text, nullable=True),
        sa.Column("metadata", JSONB, nullable=True),
    )
    op.create_index(
        "ix_notification_logs_created_at", "notification_logs", ["created_at"]
    )
    op.create_index(
        "ix_notification_logs_status", "notification_logs", ["status"]
    )
    op.create_index(
        "ix_notification_logs_channel", "notification_logs", ["channel"]
    )
    op.create_index("ix_notification_logs_type", "notification_logs", ["type"])


def downgrade() -> None:
    op.drop_index("ix_notification_logs_type", table_name="notification_logs")
    op.drop_index("ix_notification_logs_channel", table_name="notification_logs")
    op.drop_index("ix_notification_logs_status", table_name="notification_logs")
    op.drop_index(
        "ix_notification_logs_created_at", table_name="notification_logs"
    )
    op.drop_table("notification_logs")
