# app/api/routes/photos.py
from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.core.ownership import OwnerContext
from app.core.pagination import clamp_limit, clamp_ttl
from app.schemas.photo import (
    PhotoConfirm,
    PhotoListResponse,
    PhotoResponse,
    PhotoUpdate,
    PhotoUrlResponse,
    PresignRequest,
    PresignResponse,
)
from app.api.deps import get_current_owner
from app.services import photo_service
from app.services.storage_service import ObjectStore, get_object_store

router = APIRouter(prefix="/photos", tags=["photos"])

@router.get("", response_model=PhotoListResponse)
def list_photos(
    limit: str | None = Query(None, description="페이지당 개수 (1-100)"),
    cursor: str | None = Query(None, description="이전 응답의 next_cursor"),
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """내 사진 목록 (커서 페이지네이션)"""
    n = clamp_limit(limit, settings.photos_page_default, maximum=settings.page_limit_max)
    return photo_service.list_photos(db, owner, n, cursor)

@router.post("/presign", response_model=PresignResponse)
def presign_photo(
    data: PresignRequest,
    store: ObjectStore = Depends(get_object_store)
):
    """업로드 URL 발급"""
    return photo_service.presign_upload(store, data)

@router.post("/confirm", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
def confirm_photo(
    data: PhotoConfirm,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store)
):
    """업로드 완료 확인 (같은 key면 기존 사진을 200으로 반환)"""
    photo, created = photo_service.confirm_photo(db, owner, data, store)
    if created:
        return photo
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=PhotoResponse.model_validate(photo).model_dump(mode="json")
    )

@router.get("/{photo_id}", response_model=PhotoResponse)
def get_photo(
    photo_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """사진 한 장 조회"""
    return photo_service.get_photo(db, owner, photo_id)

@router.get("/{photo_id}/url", response_model=PhotoUrlResponse)
def get_photo_url(
    photo_id: str,
    ttl: str | None = Query(None, description="유효 시간 (초, 10-3000)"),
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store)
):
    """다운로드 URL 발급"""
    seconds = clamp_ttl(
        ttl,
        settings.download_url_ttl_default,
        settings.download_url_ttl_min,
        settings.download_url_ttl_max,
    )
    return photo_service.photo_download_url(db, owner, photo_id, store, seconds)

@router.patch("/{photo_id}", response_model=PhotoResponse)
def update_photo(
    photo_id: str,
    data: PhotoUpdate,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """제목/설명 수정"""
    return photo_service.update_photo(db, owner, photo_id, data)

@router.delete("/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_photo(
    photo_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store)
):
    """사진 삭제 (소프트 삭제 + 오브젝트 삭제 시도)"""
    photo_service.delete_photo(db, owner, photo_id, store)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
