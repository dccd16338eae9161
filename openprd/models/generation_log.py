"""Generation log model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from openprd.db.database import Base
from openprd.models._common import _utcnow


class GenerationLog(Base):
    """Audit record of one generation attempt, successful or not."""

    __tablename__ = "generation_logs"
    __table_args__ = (
        Index("idx_logs_user_created", "user_id", "created_at"),
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
    prd_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("prds.id"),
        nullable=True,
    )
    action: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="generate",
    )
    model_provider: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )
    model_name: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    tokens_input: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    tokens_output: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    tokens_total: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    cost_usd: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
    )
    duration_ms: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    error_message: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    # "metadata" is reserved on declarative classes
    extra_metadata: Mapped[dict | None] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )
