# app/core/logger.py
from loguru import logger
import sys
import os

from app.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[request_id]} | "
    "{name}:{function}:{line} - {message}"
)

os.makedirs(settings.log_dir, exist_ok=True)

logger.remove()

# 요청 밖 로그(시작/종료, 마이그레이션)는 request_id가 "-"
logger.configure(extra={"request_id": "-"})

# 콘솔
logger.add(
    sys.stdout,
    colorize=True,
    format=CONSOLE_FORMAT,
    level=settings.log_level,
)

# 전체 로그 파일 (엔드포인트가 스레드풀에서 돌아서 enqueue)
logger.add(
    os.path.join(settings.log_dir, "moments.log"),
    rotation=settings.log_rotation,
    retention=settings.log_retention,
    compression="zip",
    format=FILE_FORMAT,
    level="DEBUG",
    enqueue=True,
)

# 에러만 (스택 포함, 변수 값은 안 남김)
logger.add(
    os.path.join(settings.log_dir, "error.log"),
    rotation=settings.log_rotation,
    retention=settings.log_retention,
    compression="zip",
    format=FILE_FORMAT,
    level="ERROR",
    backtrace=True,
    diagnose=False,
    enqueue=True,
)
