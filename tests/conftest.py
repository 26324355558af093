import os
import tempfile

# app을 import 하기 전에 설정 (로그/DB가 작업 디렉토리에 생기지 않도록)
_TMP = tempfile.mkdtemp(prefix="moments-test-")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(_TMP, "logs"))
os.environ.setdefault("ENSURE_BUCKET_ON_STARTUP", "false")

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.config import settings
from app.core.exceptions import UpstreamFailure
from app.database import build_engine, get_db, init_db, seed_local_user
from app.models.photo import Photo
from app.models.user import User
from app.services.storage_service import get_object_store
from main import app

OTHER_USER = "other_user"


class FakeObjectStore:
    """메모리 오브젝트 스토리지 (presign은 가짜 URL)"""

    def __init__(self, bucket="photos"):
        self.bucket = bucket
        self.objects = {}
        self.deleted = []
        self.presigned = []
        self.fail_delete = False
        self.healthy = True

    def presign_put(self, key, content_type, expires):
        self.presigned.append(("PUT", key, expires))
        return f"http://fake-s3/{self.bucket}/{key}?X-Amz-Expires={expires}", {"Content-Type": content_type}

    def presign_get(self, key, ttl):
        self.presigned.append(("GET", key, ttl))
        return f"http://fake-s3/{self.bucket}/{key}?X-Amz-Expires={ttl}"

    def head(self, key):
        return self.objects.get(key)

    def delete(self, key):
        if self.fail_delete:
            raise UpstreamFailure("object_delete_failed") from RuntimeError("connection refused")
        self.objects.pop(key, None)
        self.deleted.append(key)

    def health(self):
        if not self.healthy:
            raise UpstreamFailure("bucket_unavailable") from RuntimeError("no such bucket")


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path}/test.db")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with factory() as db:
        seed_local_user(db)
        db.add(User(id=OTHER_USER, email="other@example.com", username="Other"))
        db.commit()
    return factory


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def client(session_factory, store):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_photo(session_factory):
    """사진 행을 DB에 직접 넣고 id 반환"""
    base = datetime(2026, 1, 1, 12, 0, 0)

    def _add(photo_id=None, owner_id=None, created_at=None, deleted=False, key=None, title=""):
        photo_id = photo_id or str(uuid4())
        with session_factory() as db:
            photo = Photo(
                id=photo_id,
                owner_id=owner_id or settings.local_user_id,
                title=title,
                description="",
                origin_key=key or f"{photo_id}.jpg",
                content_type="image/jpeg",
                bytes=1024,
                created_at=created_at or base,
                deleted_at=base + timedelta(days=1) if deleted else None,
            )
            db.add(photo)
            db.commit()
        return photo_id

    return _add


@pytest.fixture
def count_rows(session_factory):
    def _count(model, **filters):
        with session_factory() as db:
            return db.query(model).filter_by(**filters).count()

    return _count
