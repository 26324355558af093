# app/models/album.py
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.database import Base
from app.models.soft_delete import SoftDeleteMixin
import uuid

class Album(SoftDeleteMixin, Base):
    """앨범 모델"""
    __tablename__ = "albums"

    # 기본 필드
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")

    # 커버 사진 (앨범에 연결된 사진이거나 NULL)
    cover_photo_id = Column(String, ForeignKey("photos.id", ondelete="SET NULL"), nullable=True, index=True)

    # 타임스탬프
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # 관계
    owner = relationship("User", backref="albums")
    cover = relationship("Photo", foreign_keys=[cover_photo_id])
    entries = relationship("AlbumPhoto", back_populates="album", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Album {self.title}>"

class AlbumPhoto(Base):
    """앨범-사진 연결 (같은 쌍은 한 번만)"""
    __tablename__ = "album_photos"

    album_id = Column(String, ForeignKey("albums.id", ondelete="CASCADE", onupdate="CASCADE"), primary_key=True, index=True)
    photo_id = Column(String, ForeignKey("photos.id", ondelete="CASCADE", onupdate="CASCADE"), primary_key=True, index=True)

    pos = Column(Integer, nullable=False, default=0, index=True)  # 앨범 내 순서
    added_at = Column(DateTime, nullable=False, default=utcnow, index=True)  # 앨범 사진 목록 정렬 키

    # 관계
    album = relationship("Album", back_populates="entries")
    photo = relationship("Photo")

    def __repr__(self):
        return f"<AlbumPhoto {self.album_id}:{self.photo_id}>"
