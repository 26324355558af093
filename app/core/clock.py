# app/core/clock.py
from datetime import datetime, timezone

def utcnow() -> datetime:
    """naive UTC 현재 시각 (DB에는 모두 naive UTC로 저장)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_naive_utc(value: datetime) -> datetime:
    """aware datetime은 UTC로 바꾼 뒤 tzinfo 제거"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
