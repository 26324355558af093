# main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.api.routes import albums, photos, system
from app.core.exceptions import AppException, UpstreamFailure
from app.core.logging_middleware import log_requests
from app.core.logger import logger
from app.database import SessionLocal, init_db, seed_local_user
from app.services.storage_service import get_object_store

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug
)

# ===== 로깅 미들웨어 (요청 ID + 500 변환) =====
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    return await log_requests(request, call_next)
# ==========================================

# 요청 크기 제한 미들웨어 (바이너리는 presigned URL로 직접 올리므로 JSON만 받음)
MAX_REQUEST_SIZE = 1 * 1024 * 1024

@app.middleware("http")
async def limit_request_size(request: Request, call_next):
    """요청 크기 제한"""
    if request.method in ["POST", "PUT", "PATCH", "DELETE"]:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_REQUEST_SIZE:
            return JSONResponse(
                status_code=413,
                content={"error": "request_too_large"}
            )
    return await call_next(request)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# 라우터 등록
app.include_router(system.router)
app.include_router(photos.router)
app.include_router(albums.router)

# ===== 에러 응답은 전부 {"error": "<코드>"} =====
@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.error}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """본문 JSON이 깨졌거나 타입이 틀림"""
    return JSONResponse(status_code=400, content={"error": "bad_request"})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    codes = {404: "not_found", 405: "method_not_allowed"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": codes.get(exc.status_code, f"http_{exc.status_code}")},
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(SQLAlchemyError)
async def db_exception_handler(request: Request, exc: SQLAlchemyError):
    """서비스에서 분류되지 않은 DB 에러"""
    logger.error(f"DB 에러: {exc}")
    return JSONResponse(status_code=500, content={"error": "storage_failure"})
# ==========================================

# ===== 시작/종료 =====
@app.on_event("startup")
def startup_event():
    logger.info(f"{settings.app_name} 서버 시작 (v{settings.app_version})")

    # DB 테이블 + 로컬 유저
    init_db()
    db = SessionLocal()
    try:
        seed_local_user(db)
    finally:
        db.close()

    # 오브젝트 스토리지 확인
    store = get_object_store()
    try:
        store.health()
    except UpstreamFailure as e:
        logger.warning(f"버킷 헬스체크 실패 ({store.bucket}): {e.__cause__}")

    if settings.ensure_bucket_on_startup:
        store.ensure_bucket()

    try:
        store.set_bucket_cors(settings.cors_origins)
    except UpstreamFailure as e:
        logger.warning(f"버킷 CORS 설정 실패 ({store.bucket}): {e.__cause__}")

@app.on_event("shutdown")
def shutdown_event():
    logger.info(f"{settings.app_name} 서버 종료")
# ==========================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="127.0.0.1", port=8173, reload=settings.debug)
