"""
DevConnect Backend — Account SQLAlchemy Model
===============================================

What:  ORM model representing the `accounts` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by AccountService, ConnectionService and the authenticator dependency.
When:  Created on signup; mutated by profile edits and password changes.

Column notes:
    - email is stored case-folded and trimmed; the unique constraint is the
      source of truth for identifier uniqueness.
    - password_hash is a bcrypt hash and never leaves the service layer.
    - skills is a JSON list of strings (at most 10, enforced in the schemas).
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

DEFAULT_ABOUT = "Default description of the User"
DEFAULT_PHOTO_URL = (
    "https://encrypted-tbn0.gstatic.com/images?q=tbn:ANd9GcRLMI5YxZE03Vnj-s-sth2_JxlPd30Zy7yEGg&s"
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    """
    A registered user identity record.

    Lifecycle:
        1. Created by POST /signup
        2. Profile fields updated by PATCH /profile/edit (allow-listed)
        3. password_hash replaced by PATCH /profile/password
        4. Removed by DELETE /profile; connection requests are left in place

    Query Patterns:
        - Login: WHERE email = :email → unique index on email
        - Feed:  WHERE id NOT IN (...) ORDER BY created_at, id
    """

    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login identifier, lower-cased and trimmed",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the account password",
    )

    first_name: Mapped[str] = mapped_column(String(15), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(
        String(10),
        nullable=True,
        comment="One of: male, female, others",
    )

    about: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_ABOUT,
    )

    skills: Mapped[List[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )

    photo_url: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        default=DEFAULT_PHOTO_URL,
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

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email='{self.email}')>"
