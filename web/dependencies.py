"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
풀과 Executor는 lifespan에서 생성되어 app.state에 보관 (전역 변수 없음).
"""

from fastapi import Request

from adapters.db.pool import ConnectionPool
from core.config.loader import LedgerConfig
from core.ledger.errors import StoreError
from core.ledger.executor import LedgerExecutor


def get_app_config(request: Request) -> LedgerConfig:
    """애플리케이션 설정 반환"""
    return request.app.state.config


def get_pool(request: Request) -> ConnectionPool:
    """연결 풀 반환"""
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise StoreError("Connection pool is not initialized")
    return pool


def get_executor(request: Request) -> LedgerExecutor:
    """LedgerExecutor 반환"""
    executor = getattr(request.app.state, "executor", None)
    if executor is None:
        raise StoreError("Ledger executor is not initialized")
    return executor
