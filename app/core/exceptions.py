# app/core/exceptions.py
from fastapi import status

class AppException(Exception):
    """애플리케이션 기본 예외 (error: 기계가 읽는 에러 코드)"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error = "internal_server_error"

    def __init__(self, error: str | None = None):
        self.error = error or self.default_error
        super().__init__(self.error)

class BadRequest(AppException):
    """잘못된 요청 (본문, 경로, 파라미터)"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_error = "bad_request"

class InvalidCursor(BadRequest):
    """커서 디코딩 실패 - 클라이언트 에러"""
    default_error = "bad_cursor"

class NotFound(AppException):
    """리소스 없음 (또는 소유자가 아님)"""
    status_code = status.HTTP_404_NOT_FOUND
    default_error = "not_found"

class InvalidReference(AppException):
    """다른 엔티티를 잘못 참조"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_error = "invalid_reference"

class PhotoNotFound(InvalidReference):
    """앨범에 넣으려는 사진 중 일부가 없음/삭제됨/남의 것"""
    default_error = "photo_not_found"

class CoverNotInAlbum(InvalidReference):
    """커버 사진이 앨범에 속해 있지 않음"""
    default_error = "cover_not_in_album"

class Conflict(AppException):
    status_code = status.HTTP_409_CONFLICT
    default_error = "conflict"

class StorageFailure(AppException):
    """DB 트랜잭션/쿼리 실패"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error = "storage_failure"

class UpstreamFailure(AppException):
    """오브젝트 스토리지 호출 실패"""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_error = "upstream_failure"
