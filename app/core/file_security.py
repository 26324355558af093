# app/core/file_security.py
import os
import mimetypes
import uuid

MAX_EXTENSION_LENGTH = 10

def sanitize_filename(filename: str) -> str:
    """파일명 안전하게 변환 (경로 제거)"""
    filename = (filename or "").strip().replace("\\", "/")
    filename = os.path.basename(filename)  # 경로 제거
    if filename in (".", ".."):
        return ""
    return filename

def safe_extension(filename: str) -> str:
    """확장자 (소문자, 이상한 문자가 섞였으면 버림)"""
    _, ext = os.path.splitext(filename)
    ext = ext.lower()
    body = ext[1:]
    if not body or len(body) > MAX_EXTENSION_LENGTH or not body.isalnum():
        return ""
    return ext

def guess_content_type(filename: str) -> str:
    """확장자로 MIME 타입 추측 (모르면 빈 문자열)"""
    ext = safe_extension(filename)
    if not ext:
        return ""
    return mimetypes.guess_type(f"file{ext}")[0] or ""

def new_object_key(filename: str) -> str:
    """스토리지 키 생성 (UUID + 원본 확장자, 재사용 안 함)"""
    return f"{uuid.uuid4()}{safe_extension(filename)}"
