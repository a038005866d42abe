"""initial tracker schema: staff, time entries, quota settings/status, strikes

Revision ID: 4f1a9c2e7b10
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1a9c2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'staff_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('rank', sa.Integer(), nullable=False),
        sa.Column('rank_name', sa.String(length=80), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'time_entries',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('staff_id', sa.Integer(), sa.ForeignKey('staff_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('session_start', sa.DateTime(), nullable=False),
        sa.Column('session_end', sa.DateTime(), nullable=True),
        sa.Column('duration', sa.Float(), nullable=False, server_default='0'),
        sa.Column('action', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_time_entries_staff_id', 'time_entries', ['staff_id'])
    op.create_index('ix_time_entry_staff_start', 'time_entries', ['staff_id', 'session_start'])
    op.create_index('ix_time_entry_start', 'time_entries', ['session_start'])

    op.create_table(
        'quota_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('weekly_requirement', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('week_start', sa.SmallInteger(), nullable=False, server_default='1'),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'quota_status',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_id', sa.Integer(), sa.ForeignKey('staff_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('week_start', sa.DateTime(), nullable=False),
        sa.Column('week_end', sa.DateTime(), nullable=False),
        sa.Column('total_hours', sa.Float(), nullable=False, server_default='0'),
        sa.Column('quota_met', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('staff_id', 'week_start', name='uq_quota_status_staff_week'),
    )
    op.create_index('ix_quota_status_staff_id', 'quota_status', ['staff_id'])

    op.create_table(
        'quota_strikes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_id', sa.Integer(), sa.ForeignKey('staff_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('week_start', sa.DateTime(), nullable=False),
        sa.Column('week_end', sa.DateTime(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('given_by', sa.String(length=120), nullable=True),
        sa.Column('given_at', sa.DateTime(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('deactivated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_quota_strikes_staff_id', 'quota_strikes', ['staff_id'])
    op.create_index('ix_quota_strike_staff_active', 'quota_strikes', ['staff_id', 'active'])


def downgrade() -> None:
    for table in ('quota_strikes', 'quota_status', 'quota_settings', 'time_entries', 'staff_members'):
        try:
            op.drop_table(table)
        except Exception:
            pass
