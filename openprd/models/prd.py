"""PRD and section models."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from openprd.db.database import Base
from openprd.models._common import _utcnow


class PRD(Base):
    """A generated Product Requirements Document."""

    __tablename__ = "prds"
    __table_args__ = (
        Index("idx_prds_user_created", "user_id", "created_at"),
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
    title: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )
    input_text: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    input_mode: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="quick",
    )
    wizard_responses: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
    )
    generated_content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    output_mode: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="ai_agent",
    )
    model_provider: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )
    model_name: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    total_tokens: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    generation_time_ms: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    cost_usd: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
    )
    compaction_used: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    sections: Mapped[list[Section]] = relationship(
        back_populates="prd",
        cascade="all, delete-orphan",
        order_by="Section.section_order",
        lazy="selectin",
    )


class Section(Base):
    """One numbered top-level section of a PRD."""

    __tablename__ = "sections"
    __table_args__ = (
        Index("idx_sections_prd", "prd_id", "section_order"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    prd_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("prds.id", ondelete="CASCADE"),
        nullable=False,
    )
    section_type: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    section_order: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    tokens: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )
    parent_version: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    regeneration_notes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
    )

    prd: Mapped[PRD] = relationship(back_populates="sections")
