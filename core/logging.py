"""
Ledger 서비스 로그 출력 구성

루트 로거에 stdout 핸들러와 자정 기준 회전 파일 핸들러를 붙인다.
Ledger 모듈은 logging.getLogger(__name__)만 사용하고 핸들러는 여기서만 설정.
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7

# WARNING 미만은 버리는 외부 로거 (aiosqlite는 SQL 실행마다 DEBUG 로그)
NOISY_LOGGERS = [
    "aiosqlite",
    "httpcore",
    "httpx",
    "asyncio",
    "uvicorn.access",
]


def get_log_dir(process_name: str) -> Path:
    """프로세스별 로그 디렉토리"""
    return Paths.WEB_LOGS_DIR if process_name == "web" else Paths.LOGS_DIR


def get_log_file_path(process_name: str) -> Path:
    """로그 파일 경로 반환"""
    return get_log_dir(process_name) / f"{process_name}.log"


def _ledger_handlers(
    log_file: Path,
    console_level: int | str,
    file_level: int | str,
) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    stdout = logging.StreamHandler(sys.stdout)
    stdout.setLevel(console_level)

    rotating = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    # 백업 파일: web.log.2026-10-18
    rotating.suffix = "%Y-%m-%d"
    rotating.setLevel(file_level)

    handlers: list[logging.Handler] = [stdout, rotating]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    process_name: str,
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거를 Ledger 서비스용으로 재구성

    여러 번 호출해도 핸들러가 쌓이지 않는다 (기존 핸들러는 닫고 교체).

    Args:
        process_name: 로그 파일 이름 겸 디렉토리 선택 키
        console_level: stdout 레벨
        file_level: 파일 레벨
        log_dir: 지정 시 get_log_dir() 대신 사용

    Returns:
        루트 Logger
    """
    target_dir = log_dir if log_dir is not None else get_log_dir(process_name)
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"{process_name}.log"

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    # 필터링은 핸들러 레벨에서
    root.setLevel(logging.DEBUG)
    for handler in _ledger_handlers(log_file, console_level, file_level):
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info(
        "로그 출력 구성",
        extra={
            "process_name": process_name,
            "log_file": str(log_file),
            "backup_days": LOG_FILE_BACKUP_COUNT,
        },
    )
    return root
