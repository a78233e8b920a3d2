"""Create pages table for landing page content.

Revision ID: 002_pages
Revises: 001_users
Create Date: 2025-06-02
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002_pages'
down_revision = '001_users'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('pages',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False),
        # Exactly one row (slug '/') is the main page
        sa.Column('is_main', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('seo_title', sa.String(255), nullable=True),
        sa.Column('seo_description', sa.Text(), nullable=True),
        # Nested page content
        sa.Column('navigation', sa.JSON(), nullable=True),
        sa.Column('videos', sa.JSON(), nullable=True),
        sa.Column('welcome_section', sa.JSON(), nullable=True),
        sa.Column('stats', sa.JSON(), nullable=True),
        sa.Column('gallery', sa.JSON(), nullable=True),
        sa.Column('locations', sa.JSON(), nullable=True),
        sa.Column('footer', sa.JSON(), nullable=True),
        # Timestamps
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index('ix_pages_slug', 'pages', ['slug'], unique=True)
    op.create_index('ix_pages_main_created', 'pages', ['is_main', 'created_at'])


def downgrade():
    op.drop_index('ix_pages_main_created', table_name='pages')
    op.drop_index('ix_pages_slug', table_name='pages')
    op.drop_table('pages')
