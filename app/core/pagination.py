# app/core/pagination.py
from typing import Callable, Sequence, TypeVar
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query

from app.core.cursor import decode_cursor, encode_cursor

T = TypeVar("T")

def _parse_int(raw) -> int | None:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None

def clamp_limit(raw, default: int, minimum: int = 1, maximum: int = 100) -> int:
    """limit 파라미터 정리 (숫자가 아니거나 범위 밖이면 기본값)"""
    n = _parse_int(raw)
    if n is None or n < minimum or n > maximum:
        return default
    return n

def clamp_ttl(raw, default: int, minimum: int, maximum: int) -> int:
    """ttl 파라미터 정리 (숫자가 아니면 기본값, 범위 밖이면 경계값)"""
    n = _parse_int(raw)
    if n is None:
        return default
    return max(minimum, min(maximum, n))

def keyset_page(query: Query, sort_col, id_col, limit: int, cursor: str | None) -> list:
    """
    (정렬 컬럼 DESC, id DESC) 순서로 한 페이지 조회.
    커서가 있으면 그 행 '다음'부터: sort < t OR (sort = t AND id < id)
    """
    if cursor:
        sort_ts, last_id = decode_cursor(cursor)
        query = query.filter(
            or_(
                sort_col < sort_ts,
                and_(sort_col == sort_ts, id_col < last_id),
            )
        )
    return query.order_by(sort_col.desc(), id_col.desc()).limit(limit).all()

def next_cursor(rows: Sequence[T], limit: int, key: Callable[[T], tuple[datetime, str]]) -> str:
    """꽉 찬 페이지면 마지막 행으로 다음 커서, 아니면 빈 문자열"""
    if not rows or len(rows) < limit:
        return ""
    sort_ts, row_id = key(rows[-1])
    return encode_cursor(sort_ts, row_id)
