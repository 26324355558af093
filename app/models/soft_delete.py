# app/models/soft_delete.py
from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlalchemy.ext.hybrid import hybrid_property

class SoftDeleteMixin:
    """소프트 삭제 (deleted_at 타임스탬프, 행은 남김)"""

    deleted_at = Column(DateTime, nullable=True, index=True)

    @hybrid_property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @is_deleted.expression
    def is_deleted(cls):
        return cls.deleted_at.isnot(None)

    @classmethod
    def active(cls):
        """모든 조회 경로에서 쓰는 '삭제 안 됨' 조건"""
        return cls.deleted_at.is_(None)

    def soft_delete(self, now: datetime) -> None:
        self.deleted_at = now
