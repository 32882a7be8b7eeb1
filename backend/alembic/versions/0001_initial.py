"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _document_columns():
    return [
        sa.Column('id', sa.String(length=24), primary_key=True),
        sa.Column('slug', sa.String(length=255), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'artists',
        *_document_columns(),
        sa.Column('title', sa.String(length=255), nullable=False, unique=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('object_id', sa.String(length=64), nullable=True),
    )
    op.create_table(
        'shows',
        *_document_columns(),
        sa.Column('title', sa.String(length=255), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('object_id', sa.String(length=64), nullable=True),
    )
    op.create_table(
        'genres',
        *_document_columns(),
        sa.Column('title', sa.String(length=255), nullable=False, unique=True),
        sa.Column('color', sa.String(length=32), nullable=False),
    )
    op.create_table(
        'recordings',
        *_document_columns(),
        sa.Column('title', sa.String(length=255), nullable=False, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('show_id', sa.String(length=24), sa.ForeignKey('shows.id'), nullable=False),
        sa.Column('audio', sa.String(length=500), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=False),
        sa.Column('object_id', sa.String(length=64), nullable=True),
        sa.Column('time_start', sa.DateTime(), nullable=False, index=True),
        sa.Column('time_end', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'recording_artists',
        sa.Column('recording_id', sa.String(length=24), sa.ForeignKey('recordings.id', ondelete='CASCADE'),
                  primary_key=True),
        sa.Column('artist_id', sa.String(length=24), sa.ForeignKey('artists.id', ondelete='CASCADE'),
                  primary_key=True),
    )
    op.create_table(
        'recording_genres',
        sa.Column('recording_id', sa.String(length=24), sa.ForeignKey('recordings.id', ondelete='CASCADE'),
                  primary_key=True),
        sa.Column('genre_id', sa.String(length=24), sa.ForeignKey('genres.id', ondelete='CASCADE'),
                  primary_key=True),
    )
    op.create_table(
        'blog_posts',
        *_document_columns(),
        sa.Column('title', sa.String(length=255), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('object_id', sa.String(length=64), nullable=True),
    )
    op.create_table(
        'projects',
        *_document_columns(),
        sa.Column('title', sa.String(length=255), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('object_id', sa.String(length=64), nullable=True),
        sa.Column('time_start', sa.DateTime(), nullable=False),
        sa.Column('time_end', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=24), primary_key=True),
        sa.Column('username', sa.String(length=120), nullable=False, unique=True, index=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('first_name', sa.String(length=120), nullable=True),
        sa.Column('last_name', sa.String(length=120), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )


def downgrade():
    for table in ('users', 'projects', 'blog_posts', 'recording_genres', 'recording_artists',
                  'recordings', 'genres', 'shows', 'artists'):
        op.drop_table(table)
