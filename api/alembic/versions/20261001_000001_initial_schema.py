"""Initial demonlist schema: players, demons, submitters, records.

Revision ID: 20261001_000001
Revises:
Create Date: 2026-10-01
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "20261001_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("banned", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.UniqueConstraint("name", name="uq_players_name"),
    )
    op.create_index("idx_players_name_lower", "players", [sa.text("lower(name)")], unique=False)

    op.create_table(
        "demons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("requirement", sa.Integer(), nullable=False),
        sa.UniqueConstraint("position", name="uq_demons_position"),
    )
    op.create_index("ix_demons_name", "demons", ["name"], unique=False)

    op.create_table(
        "submitters",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ip", sa.String(length=45), nullable=False),
        sa.Column("banned", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.UniqueConstraint("ip", name="uq_submitters_ip"),
    )

    op.create_table(
        "records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("progress", sa.Integer(), nullable=False),
        sa.Column("video", sa.String(length=200), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("player_id", sa.Integer(), sa.ForeignKey("players.id", ondelete="CASCADE"), nullable=False),
        sa.Column("demon_id", sa.Integer(), sa.ForeignKey("demons.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "submitter_id",
            sa.Integer(),
            sa.ForeignKey("submitters.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.CheckConstraint("progress BETWEEN 0 AND 100", name="ck_records_progress_range"),
    )
    op.create_index("idx_records_player_demon", "records", ["player_id", "demon_id"], unique=False)
    op.create_index("idx_records_video", "records", ["video"], unique=False)
    op.create_index("idx_records_status", "records", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_records_status", table_name="records")
    op.drop_index("idx_records_video", table_name="records")
    op.drop_index("idx_records_player_demon", table_name="records")
    op.drop_table("records")
    op.drop_table("submitters")
    op.drop_index("ix_demons_name", table_name="demons")
    op.drop_table("demons")
    op.drop_index("idx_players_name_lower", table_name="players")
    op.drop_table("players")
