# app/schemas/photo.py
from pydantic import BaseModel
from datetime import datetime

class PresignRequest(BaseModel):
    """업로드 URL 요청"""
    filename: str = ""
    content_type: str = ""

class PresignResponse(BaseModel):
    """업로드 URL 응답 (클라이언트가 headers 그대로 PUT)"""
    url: str
    key: str
    headers: dict[str, str]

class PhotoConfirm(BaseModel):
    """업로드 완료 확인 요청"""
    key: str = ""
    bytes: int = 0
    content_type: str = ""
    title: str = ""
    description: str = ""

class PhotoUpdate(BaseModel):
    """사진 부분 수정 (없는 필드는 그대로)"""
    title: str | None = None
    description: str | None = None

class PhotoResponse(BaseModel):
    """사진 응답"""
    id: str
    title: str
    description: str
    origin_key: str
    content_type: str
    bytes: int
    created_at: datetime

    class Config:
        from_attributes = True

class PhotoListResponse(BaseModel):
    """사진 목록 응답 (next_cursor가 빈 문자열이면 끝)"""
    items: list[PhotoResponse]
    next_cursor: str

class PhotoUrlResponse(BaseModel):
    """다운로드 URL 응답"""
    url: str
    expires_at: datetime
