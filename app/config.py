# app/config.py
from pydantic_settings import BaseSettings
from pydantic import field_validator

class Settings(BaseSettings):
    """환경변수 설정"""

    # API 기본 설정
    app_name: str = "Little Moments API"
    app_version: str = "0.0.1"
    debug: bool = False
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # 로그
    log_dir: str = "logs"
    log_level: str = "INFO"
    log_rotation: str = "10 MB"
    log_retention: str = "30 days"

    # Database (SQLite 단일 커넥션)
    database_url: str = "sqlite:///data/app.db"
    db_busy_timeout: int = 5  # 초
    db_echo: bool = False

    # S3 / MinIO
    s3_endpoint: str = "http://127.0.0.1:9000"
    s3_region: str = "us-east-1"
    s3_access_key: str = "minioadmin"
    s3_secret_key: str = "minioadmin"
    s3_bucket_photos: str = "photos"
    s3_force_path_style: bool = True
    s3_connect_timeout: int = 5
    s3_read_timeout: int = 10
    s3_max_attempts: int = 2

    # Presigned URL (초)
    upload_url_ttl: int = 600
    download_url_ttl_default: int = 300
    download_url_ttl_min: int = 10
    download_url_ttl_max: int = 3000
    verify_uploads: bool = False  # confirm 시 HEAD로 업로드 확인
    ensure_bucket_on_startup: bool = True

    # 페이지네이션
    page_limit_max: int = 100
    photos_page_default: int = 25
    albums_page_default: int = 25
    album_photos_page_default: int = 24

    # 로컬 유저 (인증 붙기 전까지)
    local_user_id: str = "local_user"
    local_user_email: str = "local@example.com"
    local_user_name: str = "LocalUser"

    @field_validator('download_url_ttl_max')
    def validate_ttl_range(cls, v, info):
        minimum = info.data.get('download_url_ttl_min', 1)
        if v < minimum:
            raise ValueError('DOWNLOAD_URL_TTL_MAX는 DOWNLOAD_URL_TTL_MIN 이상이어야 합니다')
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False

# 싱글톤 인스턴스
settings = Settings()
