# app/models/user.py
from sqlalchemy import Column, String, DateTime
from app.core.clock import utcnow
from app.database import Base
import uuid

class User(Base):
    """유저 모델 (지금은 로컬 유저 1명)"""
    __tablename__ = "users"

    # 기본 필드
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, nullable=False, default="")

    # 타임스탬프
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.email}>"
