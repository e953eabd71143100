"""SQLAlchemy models for the demonlist.

Key rules:
1. records.id and records.submitter_id never change after creation
2. per (player, demon) at most one approved record
3. a non-null video belongs to at most one record
4. progress lies within [demon.requirement, 100]

Rules 2-4 are enforced by the record lifecycle engine, not by constraints;
the indexes below are lookup aids only.

Notes hang off a record and are moved onto the surviving record whenever the
lifecycle engine deletes a record that another one supersedes.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class RecordStatus(str, Enum):
    """Record review states.

    Typical path: submitted → under consideration → approved | rejected
    """

    SUBMITTED = "submitted"
    UNDER_CONSIDERATION = "under consideration"
    APPROVED = "approved"
    REJECTED = "rejected"


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    def __repr__(self) -> str:
        return f"<Player id={self.id} name={self.name!r}>"


Index("idx_players_name_lower", func.lower(Player.name))


class Demon(Base):
    __tablename__ = "demons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    requirement: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Demon id={self.id} position={self.position} name={self.name!r}>"


class Submitter(Base):
    """Anonymous submitter, identified only by client IP."""

    __tablename__ = "submitters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ip: Mapped[str] = mapped_column(String(45), unique=True, nullable=False)
    banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")


class Record(Base):
    __tablename__ = "records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    progress: Mapped[int] = mapped_column(Integer, nullable=False)
    video: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[RecordStatus] = mapped_column(
        SAEnum(
            RecordStatus,
            name="record_status",
            native_enum=False,
            length=32,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=RecordStatus.SUBMITTED,
    )
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id", ondelete="CASCADE"), nullable=False)
    demon_id: Mapped[int] = mapped_column(ForeignKey("demons.id", ondelete="CASCADE"), nullable=False)
    submitter_id: Mapped[int | None] = mapped_column(
        ForeignKey("submitters.id", ondelete="SET NULL"), nullable=True
    )

    player: Mapped[Player] = relationship(lazy="joined")
    demon: Mapped[Demon] = relationship(lazy="joined")
    submitter: Mapped[Submitter | None] = relationship(lazy="joined")

    __table_args__ = (
        Index("idx_records_player_demon", "player_id", "demon_id"),
        Index("idx_records_video", "video"),
        Index("idx_records_status", "status"),
        CheckConstraint("progress BETWEEN 0 AND 100", name="ck_records_progress_range"),
    )

    def __repr__(self) -> str:
        return f"<Record id={self.id} progress={self.progress} status={self.status.value}>"


class RecordNote(Base):
    """Free-text note on a record, such as the remark a submitter sends along."""

    __tablename__ = "record_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = mapped_column(
        ForeignKey("records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Set once the note has been moved off a record that was deleted as superseded.
    transferred: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
