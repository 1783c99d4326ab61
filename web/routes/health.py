"""
헬스 체크 엔드포인트

GET /health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends

from adapters.db.pool import ConnectionPool
from core.ledger.executor import LedgerExecutor
from web.dependencies import get_executor, get_pool
from web.models.responses import HealthResponse
from web.services.health_service import HealthService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    pool: ConnectionPool = Depends(get_pool),
    executor: LedgerExecutor = Depends(get_executor),
) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, db_file, 풀 상태
    """
    return await HealthService(pool, executor).check()
