"""Stored provider API key model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from openprd.db.database import Base
from openprd.models._common import _utcnow


class ApiKey(Base):
    """Encrypted API key owned by a user.

    Only the vault payload and a short hint are stored; the plaintext key
    never reaches the database.
    """

    __tablename__ = "api_keys"
    __table_args__ = (
        Index("idx_api_keys_user", "user_id", "provider"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id"),
        nullable=False,
    )
    provider: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    encrypted_key: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    key_hint: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
    )
    label: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )
    last_used: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )
