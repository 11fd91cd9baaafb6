"""create events and profiles tables

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-02-20 18:12:44.201117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # 1. profiles
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('username', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    # 2. events (definitions only; recurring instances are computed)
    op.create_table(
        'events',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('clan_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('starts_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('ends_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('organizer', sa.String(length=255), nullable=True),
        sa.Column('recurrence_type', sa.String(length=16), nullable=True),
        sa.Column('recurrence_end_date', sa.Date(), nullable=True),
        sa.Column('banner_url', sa.Text(), nullable=True),
        sa.Column('is_pinned', sa.Boolean(), nullable=True, server_default='false'),
        sa.Column('forum_post_id', sa.String(length=36), nullable=True),
        sa.Column('event_type_id', sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_events_clan_id', 'events', ['clan_id'])
    op.create_index('ix_events_clan_starts_at', 'events', ['clan_id', 'starts_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_events_clan_starts_at', table_name='events')
    op.drop_index('ix_events_clan_id', table_name='events')
    op.drop_table('events')
    op.drop_table('profiles')
