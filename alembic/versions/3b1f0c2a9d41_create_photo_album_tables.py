"""create photo/album tables

Revision ID: 3b1f0c2a9d41
Revises:
Create Date: 2026-10-19 09:12:31.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f0c2a9d41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'photos',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('owner_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('origin_key', sa.String(), nullable=False, unique=True),
        sa.Column('content_type', sa.String(), nullable=False),
        sa.Column('bytes', sa.BigInteger(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_photos_owner_id', 'photos', ['owner_id'])
    op.create_index('ix_photos_created_at', 'photos', ['created_at'])
    op.create_index('ix_photos_deleted_at', 'photos', ['deleted_at'])

    op.create_table(
        'albums',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('owner_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('cover_photo_id', sa.String(), sa.ForeignKey('photos.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_albums_owner_id', 'albums', ['owner_id'])
    op.create_index('ix_albums_cover_photo_id', 'albums', ['cover_photo_id'])
    op.create_index('ix_albums_created_at', 'albums', ['created_at'])
    op.create_index('ix_albums_deleted_at', 'albums', ['deleted_at'])

    op.create_table(
        'album_photos',
        sa.Column('album_id', sa.String(), sa.ForeignKey('albums.id', ondelete='CASCADE', onupdate='CASCADE'), primary_key=True),
        sa.Column('photo_id', sa.String(), sa.ForeignKey('photos.id', ondelete='CASCADE', onupdate='CASCADE'), primary_key=True),
        sa.Column('pos', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('added_at', sa.DateTime(), nullable=False),
    )
    # 앨범 사진 목록 정렬 (added_at DESC, photo_id DESC)
    op.create_index('ix_album_photos_album_id', 'album_photos', ['album_id'])
    op.create_index('ix_album_photos_photo_id', 'album_photos', ['photo_id'])
    op.create_index('ix_album_photos_pos', 'album_photos', ['pos'])
    op.create_index('ix_album_photos_added_at', 'album_photos', ['added_at'])


def downgrade() -> None:
    # 역순으로 삭제
    op.drop_table('album_photos')
    op.drop_table('albums')
    op.drop_table('photos')
    op.drop_index('ix_users_email')
    op.drop_table('users')
