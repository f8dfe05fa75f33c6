"""
DevConnect Backend — ConnectionRequest SQLAlchemy Model
=========================================================

What:  ORM model representing the `connection_requests` table: a directed
       edge from a sender account to a receiver account with a status.
How:   sender_id / receiver_id are plain indexed UUID columns (weak references,
       no database foreign key, no cascade). The `sender` and `receiver`
       relationships are view-only joins used to attach profiles.

Table invariants:
    - ck_connection_requests_not_self: sender_id <> receiver_id
    - uq_connection_requests_pair_key: one row per unordered pair {A, B};
      pair_key is "<smaller id>:<larger id>" so A→B and B→A collide
    - idx_connection_requests_sender_receiver: (sender_id, receiver_id)
      for the existence check and the feed exclusion query
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    Index,
    String,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.account import Account


class ConnectionStatus(str, enum.Enum):
    """
    Connection request states.

        none ──send──▶ interested ──review──▶ accepted | rejected
             ╰─send──▶ ignored

    ignored, accepted and rejected are terminal.
    """

    INTERESTED = "interested"
    IGNORED = "ignored"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


SENDABLE_STATUSES = frozenset({ConnectionStatus.INTERESTED, ConnectionStatus.IGNORED})
REVIEWABLE_STATUSES = frozenset({ConnectionStatus.ACCEPTED, ConnectionStatus.REJECTED})


def make_pair_key(first: uuid.UUID, second: uuid.UUID) -> str:
    """Canonical key for the unordered pair {first, second}."""
    low, high = sorted((str(first), str(second)))
    return f"{low}:{high}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConnectionRequest(Base):
    __tablename__ = "connection_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    sender_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    receiver_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    pair_key: Mapped[str] = mapped_column(
        String(80),
        nullable=False,
        comment="Unordered pair key: '<smaller id>:<larger id>'",
    )

    status: Mapped[ConnectionStatus] = mapped_column(
        Enum(
            ConnectionStatus,
            name="connection_status",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # View-only joins; None when the counterpart account has been deleted.
    # lazy="raise": async sessions must load these explicitly (selectinload).
    sender: Mapped[Optional[Account]] = relationship(
        Account,
        primaryjoin="foreign(ConnectionRequest.sender_id) == Account.id",
        viewonly=True,
        lazy="raise",
    )
    receiver: Mapped[Optional[Account]] = relationship(
        Account,
        primaryjoin="foreign(ConnectionRequest.receiver_id) == Account.id",
        viewonly=True,
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint("sender_id <> receiver_id", name="ck_connection_requests_not_self"),
        UniqueConstraint("pair_key", name="uq_connection_requests_pair_key"),
        Index("idx_connection_requests_sender_receiver", "sender_id", "receiver_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ConnectionRequest(id={self.id}, sender={self.sender_id}, "
            f"receiver={self.receiver_id}, status='{self.status.value}')>"
        )
