"""create tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-09-28 10:12:44.000000
"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_seen', sa.DateTime(), nullable=True),
        sa.Column('preferences', sa.JSON(), nullable=True),
        sa.Column('usage_tier', sa.String(length=20), nullable=False, server_default='free'),
    )
    op.create_index('idx_users_last_seen', 'users', ['last_seen'])

    op.create_table(
        'api_keys',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=64), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('provider', sa.String(length=50), nullable=False),
        sa.Column('encrypted_key', sa.Text(), nullable=False),
        sa.Column('key_hint', sa.String(length=16), nullable=True),
        sa.Column('label', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_used', sa.DateTime(), nullable=True),
    )
    op.create_index('idx_api_keys_user', 'api_keys', ['user_id', 'provider'])

    op.create_table(
        'prds',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=64), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=True),
        sa.Column('input_text', sa.Text(), nullable=True),
        sa.Column('input_mode', sa.String(length=20), nullable=False),
        sa.Column('wizard_responses', sa.JSON(), nullable=True),
        sa.Column('generated_content', sa.Text(), nullable=True),
        sa.Column('output_mode', sa.String(length=20), nullable=False),
        sa.Column('model_provider', sa.String(length=50), nullable=True),
        sa.Column('model_name', sa.String(length=200), nullable=True),
        sa.Column('total_tokens', sa.Integer(), nullable=True),
        sa.Column('generation_time_ms', sa.Integer(), nullable=True),
        sa.Column('cost_usd', sa.Float(), nullable=True),
        sa.Column('compaction_used', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_prds_user_created', 'prds', ['user_id', 'created_at'])

    op.create_table(
        'sections',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('prd_id', sa.Integer(), sa.ForeignKey('prds.id', ondelete='CASCADE'), nullable=False),
        sa.Column('section_type', sa.String(length=200), nullable=True),
        sa.Column('section_order', sa.Integer(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('tokens', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('parent_version', sa.Integer(), nullable=True),
        sa.Column('regeneration_notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_sections_prd', 'sections', ['prd_id', 'section_order'])

    op.create_table(
        'generation_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=64), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('prd_id', sa.Integer(), sa.ForeignKey('prds.id'), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('model_provider', sa.String(length=50), nullable=True),
        sa.Column('model_name', sa.String(length=200), nullable=True),
        sa.Column('tokens_input', sa.Integer(), nullable=True),
        sa.Column('tokens_output', sa.Integer(), nullable=True),
        sa.Column('tokens_total', sa.Integer(), nullable=True),
        sa.Column('cost_usd', sa.Float(), nullable=True),
        sa.Column('duration_ms', sa.Integer(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_logs_user_created', 'generation_logs', ['user_id', 'created_at'])

    op.create_table(
        'system_prompts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('version', sa.String(length=20), nullable=False),
        sa.Column('prompt_key', sa.String(length=50), nullable=False),
        sa.Column('prompt_content', sa.Text(), nullable=False),
        sa.Column('model_specific_variations', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('changelog', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('created_by', sa.String(length=50), nullable=False, server_default='system'),
        sa.UniqueConstraint('version', 'prompt_key', name='uq_system_prompts_version_key'),
    )
    op.create_index('idx_prompts_active', 'system_prompts', ['is_active', 'prompt_key'])


def downgrade() -> None:
    op.drop_index('idx_prompts_active', table_name='system_prompts')
    op.drop_table('system_prompts')
    op.drop_index('idx_logs_user_created', table_name='generation_logs')
    op.drop_table('generation_logs')
    op.drop_index('idx_sections_prd', table_name='sections')
    op.drop_table('sections')
    op.drop_index('idx_prds_user_created', table_name='prds')
    op.drop_table('prds')
    op.drop_index('idx_api_keys_user', table_name='api_keys')
    op.drop_table('api_keys')
    op.drop_index('idx_users_last_seen', table_name='users')
    op.drop_table('users')
