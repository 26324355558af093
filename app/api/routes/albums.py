# app/api/routes/albums.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.core.ownership import OwnerContext
from app.core.pagination import clamp_limit
from app.schemas.album import (
    AlbumCreate,
    AlbumDetailResponse,
    AlbumListResponse,
    AlbumPhotoIds,
    AlbumPhotosAdded,
    AlbumPhotosRemoved,
    AlbumResponse,
    AlbumUpdate,
)
from app.api.deps import get_current_owner
from app.services import album_service

router = APIRouter(prefix="/albums", tags=["albums"])

@router.get("", response_model=AlbumListResponse)
def list_albums(
    limit: str | None = Query(None, description="페이지당 개수 (1-100)"),
    cursor: str | None = Query(None),
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """내 앨범 목록"""
    n = clamp_limit(limit, settings.albums_page_default, maximum=settings.page_limit_max)
    return album_service.list_albums(db, owner, n, cursor)

@router.post("", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
def create_album(
    data: AlbumCreate,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """앨범 생성 (사진 같이 넣기 가능)"""
    return album_service.create_album(db, owner, data)

@router.get("/{album_id}", response_model=AlbumDetailResponse)
def get_album(
    album_id: str,
    limit: str | None = Query(None, description="사진 페이지당 개수 (1-100)"),
    cursor: str | None = Query(None),
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """앨범 상세 + 사진 목록 (추가된 순서 역순)"""
    n = clamp_limit(limit, settings.album_photos_page_default, maximum=settings.page_limit_max)
    return album_service.get_album_detail(db, owner, album_id, n, cursor)

@router.patch("/{album_id}", response_model=AlbumResponse)
def update_album(
    album_id: str,
    data: AlbumUpdate,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """앨범 제목/설명/커버 수정"""
    return album_service.update_album(db, owner, album_id, data)

@router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_album(
    album_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """앨범 삭제 (소프트 삭제)"""
    album_service.delete_album(db, owner, album_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{album_id}/photos", response_model=AlbumPhotosAdded)
def add_album_photos(
    album_id: str,
    data: AlbumPhotoIds,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """앨범에 사진 추가"""
    added = album_service.add_photos(db, owner, album_id, data.photo_ids)
    return AlbumPhotosAdded(added=added)

@router.delete("/{album_id}/photos", response_model=AlbumPhotosRemoved)
def remove_album_photos(
    album_id: str,
    data: AlbumPhotoIds,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """앨범에서 사진 빼기"""
    removed = album_service.remove_photos(db, owner, album_id, data.photo_ids)
    return AlbumPhotosRemoved(removed=removed)
