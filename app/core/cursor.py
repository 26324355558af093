# app/core/cursor.py
"""
키셋 페이지네이션용 불투명 커서.

커서는 (정렬 시각, 타이브레이크 ID) 쌍을 JSON으로 직렬화한 뒤
패딩 없는 URL-safe base64로 인코딩한 문자열이다. 암호화나 서명은 없다
(비밀이 아니라 위치 표시일 뿐). 포맷이 바뀌어도 기존 커서를 잘못 읽지
않도록 페이로드에 버전 태그 ``v`` 를 넣는다.
"""
import base64
import binascii
import json
from datetime import datetime, timedelta

from app.core.clock import to_naive_utc
from app.core.exceptions import InvalidCursor

CURSOR_VERSION = 1

_EPOCH = datetime(1970, 1, 1)

def _to_micros(value: datetime) -> int:
    delta = to_naive_utc(value) - _EPOCH
    return (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds

def _from_micros(micros: int) -> datetime:
    return _EPOCH + timedelta(microseconds=micros)

def encode_cursor(sort_ts: datetime, tiebreak_id: str) -> str:
    """(시각, ID) -> 커서 문자열"""
    payload = {"v": CURSOR_VERSION, "t": _to_micros(sort_ts), "id": tiebreak_id}
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

def decode_cursor(token: str) -> tuple[datetime, str]:
    """커서 문자열 -> (시각, ID). 형식이 틀리면 InvalidCursor"""
    try:
        data = token.encode("ascii")
        data += b"=" * (-len(data) % 4)
        raw = base64.b64decode(data, altchars=b"-_", validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (ValueError, binascii.Error):
        raise InvalidCursor()

    if not isinstance(payload, dict):
        raise InvalidCursor()
    version = payload.get("v")
    if isinstance(version, bool) or version != CURSOR_VERSION:
        raise InvalidCursor()

    micros = payload.get("t")
    tiebreak_id = payload.get("id")
    # bool은 int의 하위 타입이라 따로 막는다 (v도 마찬가지)
    if not isinstance(micros, int) or isinstance(micros, bool):
        raise InvalidCursor()
    if not isinstance(tiebreak_id, str) or not tiebreak_id:
        raise InvalidCursor()

    try:
        return _from_micros(micros), tiebreak_id
    except OverflowError:
        raise InvalidCursor()
