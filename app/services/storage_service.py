# app/services/storage_service.py
from functools import lru_cache
from typing import Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.core.exceptions import UpstreamFailure
from app.core.logger import logger

_MISSING_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}
_BUCKET_EXISTS_CODES = {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}

def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))

class ObjectStore:
    """S3 호환 스토리지 래퍼 (presign, 삭제, 버킷 확인)"""

    def __init__(self, client, bucket: str, region: str = "us-east-1"):
        self.client = client
        self.bucket = bucket
        self.region = region

    @classmethod
    def from_settings(cls) -> "ObjectStore":
        session = boto3.session.Session(
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            region_name=settings.s3_region,
        )
        client = session.client(
            "s3",
            endpoint_url=settings.s3_endpoint or None,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path" if settings.s3_force_path_style else "virtual"},
                connect_timeout=settings.s3_connect_timeout,
                read_timeout=settings.s3_read_timeout,
                retries={"max_attempts": settings.s3_max_attempts, "mode": "standard"},
            ),
        )
        return cls(client, settings.s3_bucket_photos, settings.s3_region)

    def presign_put(self, key: str, content_type: str, expires: int) -> tuple[str, dict[str, str]]:
        """업로드용 PUT URL + 클라이언트가 같이 보내야 할 헤더"""
        try:
            url = self.client.generate_presigned_url(
                ClientMethod="put_object",
                Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=expires,
                HttpMethod="PUT",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"presign PUT 실패 key={key}: {e}")
            raise UpstreamFailure("presign_failed")
        return url, {"Content-Type": content_type}

    def presign_get(self, key: str, ttl: int) -> str:
        """읽기용 GET URL (ttl초 동안 유효)"""
        try:
            return self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=ttl,
                HttpMethod="GET",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"presign GET 실패 key={key}: {e}")
            raise UpstreamFailure("presign_failed")

    def head(self, key: str) -> Optional[dict]:
        """오브젝트 메타데이터 (없으면 None)"""
        try:
            resp = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return None
            logger.error(f"HEAD 실패 key={key}: {e}")
            raise UpstreamFailure("object_head_failed")
        except BotoCoreError as e:
            logger.error(f"HEAD 실패 key={key}: {e}")
            raise UpstreamFailure("object_head_failed")
        return {
            "content_length": resp.get("ContentLength"),
            "content_type": resp.get("ContentType"),
            "etag": resp.get("ETag"),
        }

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise UpstreamFailure("object_delete_failed") from e

    def health(self) -> None:
        """버킷 접근 가능 여부"""
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except (BotoCoreError, ClientError) as e:
            raise UpstreamFailure("bucket_unavailable") from e

    def ensure_bucket(self) -> None:
        """버킷이 없으면 생성 (이미 있으면 성공으로 처리)"""
        if not self.bucket:
            return
        try:
            self.client.head_bucket(Bucket=self.bucket)
            return
        except ClientError:
            pass
        except BotoCoreError as e:
            raise UpstreamFailure("bucket_unavailable") from e

        params = {"Bucket": self.bucket}
        if self.region and self.region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        try:
            self.client.create_bucket(**params)
            logger.info(f"버킷 생성: {self.bucket}")
        except ClientError as e:
            if _error_code(e) in _BUCKET_EXISTS_CODES:
                return
            raise UpstreamFailure("bucket_unavailable") from e
        except BotoCoreError as e:
            raise UpstreamFailure("bucket_unavailable") from e

    def set_bucket_cors(self, origins: list[str]) -> None:
        """브라우저에서 presigned URL로 직접 PUT/GET 할 수 있게 CORS 설정"""
        if not self.bucket:
            return
        try:
            self.client.put_bucket_cors(
                Bucket=self.bucket,
                CORSConfiguration={
                    "CORSRules": [{
                        "AllowedMethods": ["GET", "PUT", "HEAD"],
                        "AllowedHeaders": ["*"],
                        "AllowedOrigins": origins or ["*"],
                        "ExposeHeaders": ["ETag"],
                        "MaxAgeSeconds": 3000,
                    }]
                },
            )
        except (BotoCoreError, ClientError) as e:
            raise UpstreamFailure("bucket_cors_failed") from e

@lru_cache()
def get_object_store() -> ObjectStore:
    """오브젝트 스토리지 싱글톤 (FastAPI 의존성)"""
    return ObjectStore.from_settings()
