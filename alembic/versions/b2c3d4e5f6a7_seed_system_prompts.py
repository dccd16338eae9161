"""seed system prompts

Revision ID: b2c3d4e5f6a7
Revises: a1b2c3d4e5f6
Create Date: 2026-09-28 10:31:05.000000
"""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from openprd.prompts import DEFAULT_MAIN_PROMPT, DEFAULT_PROMPT_VERSION


# revision identifiers
revision: str = 'b2c3d4e5f6a7'
down_revision: Union[str, None] = 'a1b2c3d4e5f6'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


system_prompts = sa.table(
    'system_prompts',
    sa.column('version', sa.String),
    sa.column('prompt_key', sa.String),
    sa.column('prompt_content', sa.Text),
    sa.column('is_active', sa.Boolean),
    sa.column('changelog', sa.Text),
    sa.column('created_at', sa.DateTime),
    sa.column('created_by', sa.String),
)


def upgrade() -> None:
    op.bulk_insert(system_prompts, [
        {
            'version': DEFAULT_PROMPT_VERSION,
            'prompt_key': 'main',
            'prompt_content': DEFAULT_MAIN_PROMPT,
            'is_active': True,
            'changelog': 'Initial system prompt for PRD generation',
            'created_at': datetime.now(UTC).replace(tzinfo=None),
            'created_by': 'system',
        },
    ])


def downgrade() -> None:
    op.execute(
        system_prompts.delete().where(
            sa.and_(
                system_prompts.c.prompt_key == 'main',
                system_prompts.c.version == DEFAULT_PROMPT_VERSION,
            )
        )
    )
