from datetime import datetime, timedelta

from app.config import settings
from app.core.clock import utcnow
from app.models.album import Album
from app.models.photo import Photo


def _confirm(client, key="k1.jpg", **extra):
    body = {"key": key, "bytes": 2048, "content_type": "image/jpeg"}
    body.update(extra)
    return client.post("/photos/confirm", json=body)


# ===== presign =====

def test_presign_returns_url_key_and_headers(client, store):
    r = client.post("/photos/presign", json={"filename": "beach.JPG", "content_type": "image/jpeg"})
    assert r.status_code == 200
    data = r.json()
    assert data["key"].endswith(".jpg")
    assert data["key"] in data["url"]
    assert data["headers"] == {"Content-Type": "image/jpeg"}
    assert store.presigned[-1] == ("PUT", data["key"], settings.upload_url_ttl)


def test_presign_guesses_content_type_from_filename(client):
    r = client.post("/photos/presign", json={"filename": "sunset.png"})
    assert r.status_code == 200
    assert r.json()["headers"]["Content-Type"] == "image/png"


def test_presign_strips_path_from_filename(client):
    r = client.post("/photos/presign", json={"filename": "../../etc/x.PNG", "content_type": "image/png"})
    key = r.json()["key"]
    assert "/" not in key
    assert key.endswith(".png")


def test_presign_requires_content_type(client):
    r = client.post("/photos/presign", json={"filename": "noext"})
    assert r.status_code == 400
    assert r.json() == {"error": "content_type_required"}


def test_presign_keys_are_unique(client):
    keys = {
        client.post("/photos/presign", json={"filename": "a.jpg"}).json()["key"]
        for _ in range(5)
    }
    assert len(keys) == 5


# ===== confirm =====

def test_confirm_creates_photo(client):
    r = _confirm(client, title="  Beach  ", description="day one")
    assert r.status_code == 201
    data = r.json()
    assert data["origin_key"] == "k1.jpg"
    assert data["title"] == "Beach"
    assert data["description"] == "day one"
    assert data["bytes"] == 2048
    assert data["content_type"] == "image/jpeg"


def test_confirm_is_idempotent_per_key(client, count_rows):
    first = _confirm(client)
    second = _confirm(client)
    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert count_rows(Photo, origin_key="k1.jpg") == 1


def test_confirm_missing_fields(client):
    assert _confirm(client, key="").status_code == 400
    r = _confirm(client, content_type="  ")
    assert r.status_code == 400
    assert r.json() == {"error": "missing_fields"}
    assert _confirm(client, bytes=-1).json() == {"error": "missing_fields"}


def test_confirm_title_too_long(client):
    r = _confirm(client, title="a" * 101)
    assert r.status_code == 400
    assert r.json() == {"error": "title_too_long"}


def test_confirm_key_of_deleted_photo_conflicts(client, add_photo):
    add_photo("old", key="reused.jpg", deleted=True)
    r = _confirm(client, key="reused.jpg")
    assert r.status_code == 409
    assert r.json() == {"error": "origin_key_conflict"}


def test_confirm_key_of_other_owner_conflicts(client, add_photo):
    add_photo("theirs", owner_id="other_user", key="shared.jpg")
    assert _confirm(client, key="shared.jpg").status_code == 409


def test_confirm_verifies_upload_when_enabled(client, store, monkeypatch):
    monkeypatch.setattr(settings, "verify_uploads", True)
    r = _confirm(client, key="missing.jpg")
    assert r.status_code == 400
    assert r.json() == {"error": "object_not_found"}

    store.objects["present.jpg"] = {"content_length": 2048}
    assert _confirm(client, key="present.jpg").status_code == 201


def test_confirm_bad_json(client):
    r = client.post(
        "/photos/confirm",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "bad_request"}


# ===== 조회 =====

def test_get_photo(client, add_photo):
    add_photo("p1", title="Hello")
    r = client.get("/photos/p1")
    assert r.status_code == 200
    assert r.json()["title"] == "Hello"


def test_get_unknown_photo(client):
    r = client.get("/photos/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "photo_not_found"}


def test_get_other_owners_photo_is_not_found(client, add_photo):
    add_photo("theirs", owner_id="other_user")
    assert client.get("/photos/theirs").status_code == 404


def test_list_photos_pages(client, add_photo):
    t0 = datetime(2026, 2, 1)
    for i in range(5):
        add_photo(f"p{i}", created_at=t0 + timedelta(minutes=i))

    first = client.get("/photos", params={"limit": 2}).json()
    assert [p["id"] for p in first["items"]] == ["p4", "p3"]
    assert first["next_cursor"]

    second = client.get("/photos", params={"limit": 2, "cursor": first["next_cursor"]}).json()
    assert [p["id"] for p in second["items"]] == ["p2", "p1"]

    third = client.get("/photos", params={"limit": 2, "cursor": second["next_cursor"]}).json()
    assert [p["id"] for p in third["items"]] == ["p0"]
    assert third["next_cursor"] == ""


def test_list_photos_bad_limit_uses_default(client, add_photo):
    for i in range(3):
        add_photo(f"p{i}")
    for limit in ("abc", "0", "1000"):
        r = client.get("/photos", params={"limit": limit})
        assert r.status_code == 200
        assert len(r.json()["items"]) == 3


def test_list_photos_bad_cursor(client):
    r = client.get("/photos", params={"cursor": "garbage!"})
    assert r.status_code == 400
    assert r.json() == {"error": "bad_cursor"}


def test_list_photos_empty(client):
    assert client.get("/photos").json() == {"items": [], "next_cursor": ""}


# ===== 다운로드 URL =====

def test_photo_url_default_ttl(client, store, add_photo):
    add_photo("p1", key="p1.jpg")
    before = utcnow()
    r = client.get("/photos/p1/url")
    assert r.status_code == 200
    data = r.json()
    assert "p1.jpg" in data["url"]
    assert store.presigned[-1] == ("GET", "p1.jpg", settings.download_url_ttl_default)
    expires_at = datetime.fromisoformat(data["expires_at"])
    assert expires_at >= before + timedelta(seconds=settings.download_url_ttl_default)


def test_photo_url_ttl_is_clamped(client, store, add_photo):
    add_photo("p1")
    client.get("/photos/p1/url", params={"ttl": 1})
    assert store.presigned[-1][2] == 10
    client.get("/photos/p1/url", params={"ttl": 99999})
    assert store.presigned[-1][2] == 3000
    client.get("/photos/p1/url", params={"ttl": 120})
    assert store.presigned[-1][2] == 120


def test_photo_url_unknown_photo(client):
    assert client.get("/photos/nope/url").status_code == 404


# ===== 수정 =====

def test_update_photo(client, add_photo):
    add_photo("p1", title="old")
    r = client.patch("/photos/p1", json={"title": "  new  "})
    assert r.status_code == 200
    assert r.json()["title"] == "new"

    r = client.patch("/photos/p1", json={"description": "caption"})
    assert r.json()["title"] == "new"
    assert r.json()["description"] == "caption"


def test_update_photo_limits(client, add_photo):
    add_photo("p1")
    assert client.patch("/photos/p1", json={"title": "a" * 100}).status_code == 200
    r = client.patch("/photos/p1", json={"title": "a" * 101})
    assert r.json() == {"error": "title_too_long"}
    r = client.patch("/photos/p1", json={"description": "d" * 2001})
    assert r.json() == {"error": "description_too_long"}


def test_update_photo_requires_a_field(client, add_photo):
    add_photo("p1")
    r = client.patch("/photos/p1", json={})
    assert r.status_code == 400
    assert r.json() == {"error": "missing_fields"}


def test_update_unknown_photo(client):
    assert client.patch("/photos/nope", json={"title": "x"}).status_code == 404


# ===== 삭제 =====

def test_delete_photo_is_soft(client, store, session_factory, add_photo):
    add_photo("p1", key="p1.jpg")
    r = client.delete("/photos/p1")
    assert r.status_code == 204
    assert r.content == b""

    assert client.get("/photos/p1").status_code == 404
    assert client.get("/photos").json()["items"] == []
    assert store.deleted == ["p1.jpg"]

    with session_factory() as db:
        photo = db.get(Photo, "p1")
        assert photo is not None
        assert photo.deleted_at is not None


def test_delete_photo_survives_storage_failure(client, store, session_factory, add_photo):
    add_photo("p1")
    store.fail_delete = True
    assert client.delete("/photos/p1").status_code == 204
    assert client.get("/photos/p1").status_code == 404
    with session_factory() as db:
        assert db.get(Photo, "p1").is_deleted


def test_delete_unknown_photo_is_noop(client, store):
    assert client.delete("/photos/nope").status_code == 204
    assert store.deleted == []


def test_delete_photo_clears_album_cover(client, session_factory, add_photo):
    add_photo("p1")
    add_photo("p2")
    album_id = client.post("/albums", json={"title": "Trip", "photo_ids": ["p1", "p2"]}).json()["id"]

    client.delete("/photos/p1")

    detail = client.get(f"/albums/{album_id}").json()
    assert detail["cover_photo_id"] is None
    assert [p["id"] for p in detail["photos"]] == ["p2"]
    with session_factory() as db:
        assert db.get(Album, album_id).cover_photo_id is None
