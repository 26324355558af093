# app/database.py
import os
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings
from app.core.exceptions import AppException, StorageFailure
from app.core.logger import logger

def _sqlite_file(url: str) -> str | None:
    prefix = "sqlite:///"
    if not url.startswith(prefix):
        return None
    path = url[len(prefix):]
    if not path or path == ":memory:":
        return None
    return path

def build_engine(url: str, echo: bool = False, busy_timeout: int = 5) -> Engine:
    """엔진 생성 (SQLite면 WAL + FK + busy_timeout, 커넥션 1개)"""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    connect_args = {"check_same_thread": False, "timeout": busy_timeout}
    path = _sqlite_file(url)
    if path:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        # 쓰기 직렬화는 애플리케이션 락이 아니라 단일 커넥션 + SQLite 락에 맡긴다
        engine = create_engine(url, echo=echo, pool_size=1, max_overflow=0, connect_args=connect_args)
    else:
        # 인메모리 DB는 커넥션 하나를 계속 공유
        engine = create_engine(url, echo=echo, poolclass=StaticPool, connect_args=connect_args)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={busy_timeout * 1000}")
        cursor.close()

    return engine

# 데이터베이스 엔진 생성
engine = build_engine(
    settings.database_url,
    echo=settings.db_echo,  # SQL 쿼리 로그 출력
    busy_timeout=settings.db_busy_timeout,
)

# 세션 팩토리
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base 클래스 (모든 모델의 부모)
Base = declarative_base()

# DB 세션 의존성 (FastAPI에서 사용)
def get_db():
    """DB 세션 생성 및 종료"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind: Engine = engine) -> None:
    """테이블 생성 (이미 있으면 무시)"""
    from app.models import album, photo, user  # noqa: F401
    Base.metadata.create_all(bind=bind)

def seed_local_user(db: Session) -> None:
    """로컬 유저 생성 (이미 있으면 그대로)"""
    from app.models.user import User

    if db.get(User, settings.local_user_id) is not None:
        return
    db.add(User(
        id=settings.local_user_id,
        email=settings.local_user_email,
        username=settings.local_user_name,
    ))
    db.commit()

@contextmanager
def transaction(db: Session):
    """
    블록 전체를 하나의 트랜잭션으로 커밋.
    실패하면 전부 롤백 (AppException은 그대로, DB 에러는 StorageFailure로).
    """
    try:
        yield db
        db.commit()
    except AppException:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"DB 트랜잭션 실패: {e}")
        raise StorageFailure() from e
