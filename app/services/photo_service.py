# app/services/photo_service.py
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.core.clock import utcnow
from app.core.exceptions import BadRequest, Conflict, NotFound, UpstreamFailure
from app.core.file_security import guess_content_type, new_object_key, sanitize_filename
from app.core.logger import logger
from app.core.ownership import OwnerContext
from app.core.pagination import keyset_page, next_cursor
from app.database import transaction
from app.models.album import Album
from app.models.photo import Photo
from app.schemas.photo import (
    PhotoConfirm,
    PhotoListResponse,
    PhotoResponse,
    PhotoUpdate,
    PhotoUrlResponse,
    PresignRequest,
    PresignResponse,
)
from app.services.storage_service import ObjectStore

# 길이 제한 (문자 수)
MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 2000

def _clean_title(value: str) -> str:
    value = value.strip()
    if len(value) > MAX_TITLE_LENGTH:
        raise BadRequest("title_too_long")
    return value

def _clean_description(value: str) -> str:
    value = value.strip()
    if len(value) > MAX_DESCRIPTION_LENGTH:
        raise BadRequest("description_too_long")
    return value

def _owned_photos(db: Session, owner: OwnerContext):
    """내 사진 중 삭제 안 된 것"""
    return db.query(Photo).filter(Photo.owner_id == owner.user_id, Photo.active())

def presign_upload(store: ObjectStore, data: PresignRequest) -> PresignResponse:
    """업로드용 presigned URL 발급 (API는 바이너리를 직접 받지 않음)"""
    filename = sanitize_filename(data.filename)
    content_type = data.content_type.strip()
    if not content_type and filename:
        content_type = guess_content_type(filename)
    if not content_type:
        raise BadRequest("content_type_required")

    key = new_object_key(filename)
    url, headers = store.presign_put(key, content_type, settings.upload_url_ttl)
    logger.info(f"업로드 URL 발급: {key} ({content_type})")
    return PresignResponse(url=url, key=key, headers=headers)

def confirm_photo(
    db: Session,
    owner: OwnerContext,
    data: PhotoConfirm,
    store: ObjectStore | None = None,
) -> tuple[Photo, bool]:
    """
    업로드 완료 후 사진 행 등록.
    같은 key로 다시 호출하면 기존 행을 그대로 돌려준다 (created=False).
    """
    key = data.key.strip()
    content_type = data.content_type.strip()
    if not key or not content_type or data.bytes < 0:
        raise BadRequest("missing_fields")
    title = _clean_title(data.title)
    description = _clean_description(data.description)

    existing = db.query(Photo).filter(Photo.origin_key == key).first()
    if existing is not None:
        return _existing_for_owner(existing, owner), False

    if settings.verify_uploads and store is not None:
        if store.head(key) is None:
            raise BadRequest("object_not_found")

    photo = Photo(
        owner_id=owner.user_id,
        title=title,
        description=description,
        origin_key=key,
        content_type=content_type,
        bytes=data.bytes,
        created_at=utcnow(),
    )
    db.add(photo)
    try:
        db.commit()
    except IntegrityError:
        # 동시에 같은 key가 들어온 경우
        db.rollback()
        existing = db.query(Photo).filter(Photo.origin_key == key).first()
        if existing is None:
            raise
        return _existing_for_owner(existing, owner), False

    db.refresh(photo)
    logger.info(f"사진 등록: {photo.id} key={key}")
    return photo, True

def _existing_for_owner(existing: Photo, owner: OwnerContext) -> Photo:
    # 키는 재사용하지 않으므로 삭제된 행이나 남의 행과 겹치면 충돌
    if existing.owner_id != owner.user_id or existing.is_deleted:
        raise Conflict("origin_key_conflict")
    return existing

def list_photos(db: Session, owner: OwnerContext, limit: int, cursor: str | None) -> PhotoListResponse:
    """내 사진 목록 (created_at DESC, id DESC 키셋 페이지)"""
    rows = keyset_page(_owned_photos(db, owner), Photo.created_at, Photo.id, limit, cursor)
    return PhotoListResponse(
        items=[PhotoResponse.model_validate(p) for p in rows],
        next_cursor=next_cursor(rows, limit, lambda p: (p.created_at, p.id)),
    )

def get_photo(db: Session, owner: OwnerContext, photo_id: str) -> Photo:
    photo = _owned_photos(db, owner).filter(Photo.id == photo_id).first()
    if photo is None:
        raise NotFound("photo_not_found")
    return photo

def photo_download_url(
    db: Session,
    owner: OwnerContext,
    photo_id: str,
    store: ObjectStore,
    ttl: int,
) -> PhotoUrlResponse:
    """다운로드용 presigned URL (ttl초)"""
    photo = get_photo(db, owner, photo_id)
    url = store.presign_get(photo.origin_key, ttl)
    return PhotoUrlResponse(url=url, expires_at=utcnow() + timedelta(seconds=ttl))

def update_photo(db: Session, owner: OwnerContext, photo_id: str, data: PhotoUpdate) -> Photo:
    """제목/설명 부분 수정"""
    if data.title is None and data.description is None:
        raise BadRequest("missing_fields")

    updates = {}
    if data.title is not None:
        updates["title"] = _clean_title(data.title)
    if data.description is not None:
        updates["description"] = _clean_description(data.description)

    photo = get_photo(db, owner, photo_id)
    with transaction(db):
        for field, value in updates.items():
            setattr(photo, field, value)
    db.refresh(photo)
    return photo

def delete_photo(db: Session, owner: OwnerContext, photo_id: str, store: ObjectStore) -> None:
    """
    사진 소프트 삭제 후 스토리지 오브젝트 삭제 시도.

    메타데이터 삭제가 먼저 커밋되고 오브젝트 삭제는 best-effort다.
    오브젝트 삭제에 실패하면 경고 로그만 남긴다 (고아 오브젝트는 별도 정리 대상).
    이미 없거나 삭제된 사진이면 아무것도 하지 않는다.
    """
    photo = _owned_photos(db, owner).filter(Photo.id == photo_id).first()
    if photo is None:
        return

    with transaction(db):
        photo.soft_delete(utcnow())
        # 이 사진을 커버로 쓰던 앨범은 커버 해제
        db.query(Album).filter(Album.cover_photo_id == photo.id).update(
            {Album.cover_photo_id: None}, synchronize_session=False
        )
    logger.info(f"사진 삭제: {photo.id}")

    try:
        store.delete(photo.origin_key)
    except UpstreamFailure as e:
        logger.warning(f"오브젝트 삭제 실패 (메타데이터는 삭제됨) key={photo.origin_key}: {e.__cause__}")
