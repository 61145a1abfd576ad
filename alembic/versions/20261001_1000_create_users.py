"""create users table

Revision ID: 20261001_1000_create_users
Revises:
Create Date: 2026-10-01 10:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261001_1000_create_users'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(30), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(16), nullable=False, server_default='user'),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('last_location_update', sa.DateTime(timezone=True), nullable=True),
        sa.Column('location_sharing_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('geofence_radius', sa.Integer(), nullable=False, server_default='5000'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_latitude', 'users', ['latitude'])
    op.create_index('ix_users_longitude', 'users', ['longitude'])

def downgrade() -> None:
    op.drop_index('ix_users_longitude', table_name='users')
    op.drop_index('ix_users_latitude', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
