# app/services/album_service.py
"""
앨범 서비스.

앨범과 사진은 album_photos 테이블로 다대다 연결된다. 앨범 생성은 앨범 행,
연결 행, 기본 커버 지정을 하나의 트랜잭션으로 처리하므로 중간 상태가
밖에서 보이지 않는다. 같은 (앨범, 사진) 쌍을 다시 넣으면 에러 없이 무시된다.
"""
from typing import List
import uuid

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.exceptions import BadRequest, CoverNotInAlbum, NotFound, PhotoNotFound
from app.core.logger import logger
from app.core.ownership import OwnerContext
from app.core.pagination import keyset_page, next_cursor
from app.database import transaction
from app.models.album import Album, AlbumPhoto
from app.models.photo import Photo
from app.schemas.album import (
    AlbumCreate,
    AlbumDetailResponse,
    AlbumListResponse,
    AlbumResponse,
    AlbumUpdate,
)
from app.schemas.photo import PhotoResponse

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

def _owned_albums(db: Session, owner: OwnerContext):
    """내 앨범 중 삭제 안 된 것"""
    return db.query(Album).filter(Album.owner_id == owner.user_id, Album.active())

def _get_album(db: Session, owner: OwnerContext, album_id: str) -> Album:
    album = _owned_albums(db, owner).filter(Album.id == album_id).first()
    if album is None:
        raise NotFound("album_not_found")
    return album

def _require_photos(db: Session, owner: OwnerContext, photo_ids: List[str]) -> None:
    """
    사진이 전부 존재하고, 내 것이고, 삭제 안 됐는지 한 번에 확인.
    (일치하는 행 수 == 중복 제거한 요청 ID 수)
    """
    distinct_ids = set(photo_ids)
    count = db.query(func.count(Photo.id)).filter(
        Photo.id.in_(distinct_ids),
        Photo.owner_id == owner.user_id,
        Photo.active(),
    ).scalar()
    if count != len(distinct_ids):
        raise PhotoNotFound()

def _link_photos(db: Session, album_id: str, photo_ids: List[str], start_pos: int, now) -> None:
    """연결 행 삽입 (이미 있는 쌍, 요청 안의 중복은 무시)"""
    rows = [
        {"album_id": album_id, "photo_id": pid, "pos": start_pos + i, "added_at": now}
        for i, pid in enumerate(photo_ids)
    ]
    insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(AlbumPhoto).values(rows).on_conflict_do_nothing(
            index_elements=["album_id", "photo_id"]
        )
        db.execute(stmt)
        return

    # ON CONFLICT 미지원 DB: 이미 있는 쌍을 걸러서 넣는다
    existing = {
        pid for (pid,) in db.query(AlbumPhoto.photo_id).filter(
            AlbumPhoto.album_id == album_id,
            AlbumPhoto.photo_id.in_(set(photo_ids)),
        )
    }
    for row in rows:
        if row["photo_id"] in existing:
            continue
        existing.add(row["photo_id"])
        db.add(AlbumPhoto(**row))
    db.flush()

def _is_linked(db: Session, album_id: str, photo_id: str) -> bool:
    linked = db.query(AlbumPhoto).join(Photo, Photo.id == AlbumPhoto.photo_id).filter(
        AlbumPhoto.album_id == album_id,
        AlbumPhoto.photo_id == photo_id,
        Photo.active(),
    ).first()
    return linked is not None

def create_album(db: Session, owner: OwnerContext, data: AlbumCreate) -> Album:
    """
    앨범 생성 (+ 초기 사진 연결 + 기본 커버).

    사진 중 하나라도 없으면 PhotoNotFound로 전체 롤백 (앨범도 안 생김).
    커버를 따로 안 주면 photo_ids의 첫 번째 사진이 커버.
    """
    title = data.title.strip()
    if not title:
        raise BadRequest("missing_title")
    description = data.description.strip()
    photo_ids = list(data.photo_ids)
    cover_photo_id = data.cover_photo_id or None

    # 커버는 앨범에 연결될 사진이어야 함
    if cover_photo_id is not None and cover_photo_id not in photo_ids:
        raise CoverNotInAlbum()

    now = utcnow()
    album = Album(
        id=str(uuid.uuid4()),
        owner_id=owner.user_id,
        title=title,
        description=description,
        created_at=now,
        updated_at=now,
    )

    with transaction(db):
        db.add(album)
        db.flush()

        if photo_ids:
            _require_photos(db, owner, photo_ids)
            _link_photos(db, album.id, photo_ids, 0, now)
            if cover_photo_id is None:
                cover_photo_id = photo_ids[0]

        album.cover_photo_id = cover_photo_id

    db.refresh(album)
    logger.info(f"앨범 생성: {album.id} (사진 {len(set(photo_ids))}장)")
    return album

def list_albums(db: Session, owner: OwnerContext, limit: int, cursor: str | None) -> AlbumListResponse:
    """내 앨범 목록 (created_at DESC, id DESC 키셋 페이지)"""
    rows = keyset_page(_owned_albums(db, owner), Album.created_at, Album.id, limit, cursor)
    return AlbumListResponse(
        items=[AlbumResponse.model_validate(a) for a in rows],
        next_cursor=next_cursor(rows, limit, lambda a: (a.created_at, a.id)),
    )

def get_album_detail(
    db: Session,
    owner: OwnerContext,
    album_id: str,
    limit: int,
    cursor: str | None,
) -> AlbumDetailResponse:
    """
    앨범 상세 + 사진 페이지.
    정렬 키는 사진의 created_at이 아니라 연결 행의 added_at.
    """
    album = _get_album(db, owner, album_id)

    query = db.query(Photo, AlbumPhoto.added_at).join(
        AlbumPhoto, AlbumPhoto.photo_id == Photo.id
    ).filter(
        AlbumPhoto.album_id == album.id,
        Photo.owner_id == owner.user_id,
        Photo.active(),
    )
    rows = keyset_page(query, AlbumPhoto.added_at, Photo.id, limit, cursor)

    return AlbumDetailResponse(
        **AlbumResponse.model_validate(album).model_dump(),
        photos=[PhotoResponse.model_validate(photo) for photo, _ in rows],
        next_cursor=next_cursor(rows, limit, lambda row: (row[1], row[0].id)),
    )

def update_album(db: Session, owner: OwnerContext, album_id: str, data: AlbumUpdate) -> Album:
    """
    앨범 메타데이터 부분 수정.
    - 요청에 없는 필드는 그대로
    - cover_photo_id가 빈 문자열이면 커버 해제 (null은 변경 없음)
    - 커버로 지정할 사진은 이미 앨범에 연결돼 있어야 함
    """
    album = _get_album(db, owner, album_id)
    fields = data.model_fields_set

    updates = {}
    if "title" in fields and data.title is not None:
        title = data.title.strip()
        if not title:
            raise BadRequest("missing_title")
        updates["title"] = title
    if "description" in fields and data.description is not None:
        updates["description"] = data.description.strip()
    if "cover_photo_id" in fields and data.cover_photo_id is not None:
        if data.cover_photo_id == "":
            updates["cover_photo_id"] = None
        elif _is_linked(db, album.id, data.cover_photo_id):
            updates["cover_photo_id"] = data.cover_photo_id
        else:
            raise CoverNotInAlbum()

    if not updates:
        return album

    with transaction(db):
        for field, value in updates.items():
            setattr(album, field, value)
        album.updated_at = utcnow()

    db.refresh(album)
    return album

def delete_album(db: Session, owner: OwnerContext, album_id: str) -> None:
    """앨범 소프트 삭제 + 커버 해제 (연결 행은 남겨둠)"""
    album = _owned_albums(db, owner).filter(Album.id == album_id).first()
    if album is None:
        return

    with transaction(db):
        album.soft_delete(utcnow())
        album.cover_photo_id = None
    logger.info(f"앨범 삭제: {album_id}")

def add_photos(db: Session, owner: OwnerContext, album_id: str, photo_ids: List[str]) -> int:
    """
    기존 앨범에 사진 추가.
    검증은 생성과 동일 (하나라도 없으면 전체 실패), 이미 있는 사진은 무시.
    반환값은 요청한 사진 수 (중복 제거).
    """
    album = _get_album(db, owner, album_id)
    if not photo_ids:
        return 0

    now = utcnow()
    with transaction(db):
        _require_photos(db, owner, photo_ids)
        max_pos = db.query(func.max(AlbumPhoto.pos)).filter(
            AlbumPhoto.album_id == album.id
        ).scalar()
        start_pos = 0 if max_pos is None else max_pos + 1
        _link_photos(db, album.id, photo_ids, start_pos, now)

        if album.cover_photo_id is None:
            album.cover_photo_id = photo_ids[0]
        album.updated_at = now

    return len(set(photo_ids))

def remove_photos(db: Session, owner: OwnerContext, album_id: str, photo_ids: List[str]) -> int:
    """
    앨범에서 사진 제거 (연결 행 하드 삭제, 한 번에).
    반환값은 실제 삭제된 행 수가 아니라 요청한 ID 수.
    """
    album = _get_album(db, owner, album_id)
    if not photo_ids:
        return 0

    with transaction(db):
        db.query(AlbumPhoto).filter(
            AlbumPhoto.album_id == album.id,
            AlbumPhoto.photo_id.in_(set(photo_ids)),
        ).delete(synchronize_session=False)

        # 커버가 빠졌으면 커버 해제
        if album.cover_photo_id in photo_ids:
            album.cover_photo_id = None
        album.updated_at = utcnow()

    return len(photo_ids)
