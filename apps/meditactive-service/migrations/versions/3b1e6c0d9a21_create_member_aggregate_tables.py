"""Create member, catalog, session and link tables

Revision ID: 3b1e6c0d9a21
Revises:
Create Date: 2026-10-18 09:12:44.120511

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1e6c0d9a21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'goals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.UniqueConstraint('title', name='uq_goals_title'),
    )
    op.create_table(
        'session_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('name', name='uq_session_types_name'),
        sa.CheckConstraint('duration_minutes > 0', name='ck_session_types_duration_positive'),
    )
    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('goal', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_members_email', 'members', ['email'], unique=True)
    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('session_type_id', sa.Integer(), sa.ForeignKey('session_types.id'), nullable=False),
        sa.CheckConstraint('end_date > start_date', name='ck_sessions_end_after_start'),
    )
    op.create_index('idx_sessions_session_type_id', 'sessions', ['session_type_id'])
    op.create_table(
        'member_goals',
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id'), primary_key=True),
        sa.Column('goal_id', sa.Integer(), sa.ForeignKey('goals.id'), primary_key=True),
    )
    op.create_index('idx_member_goals_goal_id', 'member_goals', ['goal_id'])
    op.create_table(
        'member_sessions',
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id'), primary_key=True),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('sessions.id'), primary_key=True),
    )
    op.create_index('idx_member_sessions_session_id', 'member_sessions', ['session_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_member_sessions_session_id', table_name='member_sessions')
    op.drop_table('member_sessions')
    op.drop_index('idx_member_goals_goal_id', table_name='member_goals')
    op.drop_table('member_goals')
    op.drop_index('idx_sessions_session_type_id', table_name='sessions')
    op.drop_table('sessions')
    op.drop_index('ix_members_email', table_name='members')
    op.drop_table('members')
    op.drop_table('session_types')
    op.drop_table('goals')
