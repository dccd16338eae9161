"""User model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from openprd.db.database import Base
from openprd.models._common import _utcnow


class User(Base):
    """Lightweight user record keyed by a client-generated id (no auth)."""

    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_last_seen", "last_seen"),
    )

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )
    last_seen: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )
    preferences: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
    )
    usage_tier: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="free",
    )
