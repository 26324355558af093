from datetime import datetime, timedelta

import pytest

from app.core.cursor import decode_cursor
from app.core.ownership import local_owner
from app.core.pagination import clamp_limit, clamp_ttl, next_cursor
from app.services import photo_service


@pytest.mark.parametrize("raw, expected", [
    (None, 25),
    ("", 25),
    ("abc", 25),
    ("0", 25),
    ("-3", 25),
    ("101", 25),
    ("1", 1),
    ("50", 50),
    (" 7 ", 7),
    ("100", 100),
])
def test_clamp_limit(raw, expected):
    assert clamp_limit(raw, 25, maximum=100) == expected


@pytest.mark.parametrize("raw, expected", [
    (None, 300),
    ("x", 300),
    ("5", 10),
    ("-1", 10),
    ("60", 60),
    ("5000", 3000),
])
def test_clamp_ttl(raw, expected):
    assert clamp_ttl(raw, 300, 10, 3000) == expected


def test_next_cursor_empty_when_page_is_short():
    rows = [(datetime(2026, 1, 1), "a")]
    assert next_cursor(rows, 2, lambda r: r) == ""
    assert next_cursor([], 2, lambda r: r) == ""


def test_next_cursor_points_at_last_row():
    rows = [(datetime(2026, 1, 2), "b"), (datetime(2026, 1, 1), "a")]
    token = next_cursor(rows, 2, lambda r: r)
    assert decode_cursor(token) == (datetime(2026, 1, 1), "a")


def _walk(db, limit):
    seen = []
    cursor = None
    for _ in range(100):
        page = photo_service.list_photos(db, local_owner(), limit, cursor)
        seen.extend(p.id for p in page.items)
        if not page.next_cursor:
            return seen
        cursor = page.next_cursor
    raise AssertionError("pagination did not terminate")


@pytest.fixture
def seven_photos(add_photo):
    # 같은 created_at이 여러 개 섞인 7장
    t0 = datetime(2026, 5, 1, 10, 0, 0)
    stamps = {
        "p1": t0,
        "p2": t0,
        "p3": t0 + timedelta(seconds=1),
        "p4": t0 + timedelta(seconds=1),
        "p5": t0 + timedelta(seconds=1),
        "p6": t0 + timedelta(seconds=2),
        "p7": t0 - timedelta(microseconds=1),
    }
    for photo_id, ts in stamps.items():
        add_photo(photo_id, created_at=ts)
    # 순서: created_at DESC, id DESC
    return ["p6", "p5", "p4", "p3", "p2", "p1", "p7"]


@pytest.mark.parametrize("limit", range(1, 9))
def test_paging_visits_every_row_once(session_factory, seven_photos, limit):
    with session_factory() as db:
        seen = _walk(db, limit)
    assert seen == seven_photos
    assert len(set(seen)) == len(seen)


def test_paging_excludes_deleted_and_foreign(session_factory, add_photo, seven_photos):
    add_photo("gone", created_at=datetime(2026, 6, 1), deleted=True)
    add_photo("theirs", owner_id="other_user", created_at=datetime(2026, 6, 1))
    with session_factory() as db:
        assert _walk(db, 3) == seven_photos


def test_insert_during_paging_is_not_duplicated(session_factory, add_photo, seven_photos):
    with session_factory() as db:
        first = photo_service.list_photos(db, local_owner(), 3, None)
        db.rollback()

    # 첫 페이지 뒤에 더 최신 사진이 들어와도 다음 페이지에 끼어들지 않음
    add_photo("newest", created_at=datetime(2026, 12, 31))

    with session_factory() as db:
        rest = []
        cursor = first.next_cursor
        while cursor:
            page = photo_service.list_photos(db, local_owner(), 3, cursor)
            rest.extend(p.id for p in page.items)
            cursor = page.next_cursor

    seen = [p.id for p in first.items] + rest
    assert seen == seven_photos
    assert "newest" not in seen
