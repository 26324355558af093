# app/models/photo.py
from sqlalchemy import BigInteger, Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.core.clock import utcnow
from app.database import Base
from app.models.soft_delete import SoftDeleteMixin
import uuid

class Photo(SoftDeleteMixin, Base):
    """사진 모델 (바이너리는 오브젝트 스토리지, 여기는 메타데이터만)"""
    __tablename__ = "photos"

    # 기본 필드
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # 메타데이터
    title = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")

    # 파일 정보
    origin_key = Column(String, nullable=False, unique=True)  # 스토리지 키 (재사용 안 함)
    content_type = Column(String, nullable=False)
    bytes = Column(BigInteger, nullable=False)

    # 타임스탬프
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # 관계
    owner = relationship("User", backref="photos")

    def __repr__(self):
        return f"<Photo {self.origin_key}>"
