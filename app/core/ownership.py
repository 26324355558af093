# app/core/ownership.py
from dataclasses import dataclass

from app.config import settings

@dataclass(frozen=True)
class OwnerContext:
    """요청한 유저 (모든 서비스 함수에 전달)"""
    user_id: str

def local_owner() -> OwnerContext:
    """인증이 붙기 전까지는 로컬 유저 하나만 존재"""
    return OwnerContext(user_id=settings.local_user_id)
