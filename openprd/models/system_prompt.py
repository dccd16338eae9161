"""System prompt model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from openprd.db.database import Base
from openprd.models._common import _utcnow


class SystemPrompt(Base):
    """Versioned prompt template addressed by `prompt_key`."""

    __tablename__ = "system_prompts"
    __table_args__ = (
        UniqueConstraint("version", "prompt_key", name="uq_system_prompts_version_key"),
        Index("idx_prompts_active", "is_active", "prompt_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version: Mapped[str] = mapped_column(String(20), nullable=False)
    prompt_key: Mapped[str] = mapped_column(String(50), nullable=False)
    prompt_content: Mapped[str] = mapped_column(Text, nullable=False)
    model_specific_variations: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    changelog: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    created_by: Mapped[str] = mapped_column(String(50), nullable=False, default="system")
