"""create events table

Revision ID: 20261001_1020_create_events
Revises: 20261001_1010_create_hobbies
Create Date: 2026-10-01 10:20:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261001_1020_create_events'
down_revision = '20261001_1010_create_hobbies'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('hobby_id', sa.Integer(), sa.ForeignKey('hobbies.id'), nullable=False),
        sa.Column('organizer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('event_type', sa.String(16), nullable=False, server_default='Public'),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('formatted_address', sa.String(255), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_events_lat_lon', 'events', ['latitude', 'longitude'])
    op.create_index('ix_events_hobby_id', 'events', ['hobby_id'])
    op.create_index('ix_events_organizer_id', 'events', ['organizer_id'])
    op.create_index('ix_events_start_date', 'events', ['start_date'])

def downgrade() -> None:
    op.drop_index('ix_events_start_date', table_name='events')
    op.drop_index('ix_events_organizer_id', table_name='events')
    op.drop_index('ix_events_hobby_id', table_name='events')
    op.drop_index('ix_events_lat_lon', table_name='events')
    op.drop_table('events')
