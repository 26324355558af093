# app/api/routes/system.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.exceptions import UpstreamFailure
from app.core.logger import logger
from app.services.storage_service import ObjectStore, get_object_store

router = APIRouter(tags=["system"])

@router.get("/healthz")
def healthz():
    """헬스체크"""
    return {"ok": True}

@router.get("/version")
def version():
    return {"version": settings.app_version}

@router.get("/readyz")
def readyz(store: ObjectStore = Depends(get_object_store)):
    """오브젝트 스토리지 버킷까지 닿는지 확인"""
    try:
        store.health()
    except UpstreamFailure as e:
        logger.warning(f"버킷 헬스체크 실패 ({store.bucket}): {e.__cause__}")
        return JSONResponse(status_code=503, content={"ok": False, "bucket": store.bucket})
    return {"ok": True, "bucket": store.bucket}
