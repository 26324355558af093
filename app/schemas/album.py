# app/schemas/album.py
from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from app.schemas.photo import PhotoResponse

class AlbumCreate(BaseModel):
    """앨범 생성 요청 (photo_ids 순서 = 앨범 내 순서)"""
    title: str = ""
    description: str = ""
    cover_photo_id: Optional[str] = None
    photo_ids: List[str] = []

class AlbumUpdate(BaseModel):
    """앨범 부분 수정 (cover_photo_id를 빈 문자열로 보내면 커버 해제)"""
    title: Optional[str] = None
    description: Optional[str] = None
    cover_photo_id: Optional[str] = None

class AlbumPhotoIds(BaseModel):
    """앨범에 사진 추가/제거 요청"""
    photo_ids: List[str] = []

class AlbumResponse(BaseModel):
    """앨범 응답"""
    id: str
    title: str
    description: str
    cover_photo_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class AlbumListResponse(BaseModel):
    """앨범 목록 응답"""
    items: List[AlbumResponse]
    next_cursor: str

class AlbumDetailResponse(AlbumResponse):
    """앨범 상세 (사진은 추가된 시각 역순 페이지)"""
    photos: List[PhotoResponse]
    next_cursor: str

class AlbumPhotosAdded(BaseModel):
    added: int

class AlbumPhotosRemoved(BaseModel):
    removed: int
