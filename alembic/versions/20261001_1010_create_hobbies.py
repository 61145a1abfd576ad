"""create hobbies table

Revision ID: 20261001_1010_create_hobbies
Revises: 20261001_1000_create_users
Create Date: 2026-10-01 10:10:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261001_1010_create_hobbies'
down_revision = '20261001_1000_create_users'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'hobbies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False, unique=True),
        sa.Column('slug', sa.String(64), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(64), nullable=False, server_default='Other'),
        sa.Column('popularity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('creator_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_hobbies_slug', 'hobbies', ['slug'], unique=True)
    op.create_index('ix_hobbies_category', 'hobbies', ['category'])

def downgrade() -> None:
    op.drop_index('ix_hobbies_category', table_name='hobbies')
    op.drop_index('ix_hobbies_slug', table_name='hobbies')
    op.drop_table('hobbies')
