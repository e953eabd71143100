"""Add record_notes.

Revision ID: 20261015_000002
Revises: 20261001_000001
Create Date: 2026-10-15
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "20261015_000002"
down_revision = "20261001_000001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "record_notes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("record_id", sa.Integer(), sa.ForeignKey("records.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("transferred", sa.Boolean(), server_default=sa.text("false"), nullable=False),
    )
    op.create_index("ix_record_notes_record_id", "record_notes", ["record_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_record_notes_record_id", table_name="record_notes")
    op.drop_table("record_notes")
