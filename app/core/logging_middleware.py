# app/core/logging_middleware.py
from fastapi import Request
from fastapi.responses import JSONResponse
from app.core.logger import logger
import time
import uuid

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

def resolve_request_id(raw: str | None) -> str:
    """클라이언트가 보낸 X-Request-ID 사용, 없거나 너무 길면 새로 생성"""
    if raw is None or not raw.strip() or len(raw) > MAX_REQUEST_ID_LENGTH:
        return uuid.uuid4().hex
    return raw

async def log_requests(request: Request, call_next):
    """모든 요청/응답 로깅 + 요청 ID 부여"""

    request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
    request.state.request_id = request_id

    # 요청 시작 시간
    start_time = time.time()

    with logger.contextualize(request_id=request_id):
        # 요청 정보 로깅
        logger.info(f"➡️  {request.method} {request.url.path}")

        # 요청 처리
        try:
            response = await call_next(request)

        except Exception as e:
            process_time = (time.time() - start_time) * 1000

            # 에러 로깅 (스택 포함)
            logger.error(
                f"❌ {request.method} {request.url.path} "
                f"- Error: {str(e)} "
                f"- Time: {process_time:.2f}ms"
            )
            logger.exception("Exception details:")

            # 프로세스는 죽이지 않고 일반 500 응답으로 변환
            response = JSONResponse(
                status_code=500,
                content={"error": "internal_server_error"}
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        # 응답 시간 계산
        process_time = (time.time() - start_time) * 1000  # ms

        # 응답 로깅
        logger.info(
            f"⬅️  {request.method} {request.url.path} "
            f"- Status: {response.status_code} "
            f"- Time: {process_time:.2f}ms"
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
