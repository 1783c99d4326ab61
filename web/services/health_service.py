"""
헬스 체크 서비스

스키마 확인 + 풀 상태 + DB 파일 크기
"""

from pathlib import Path

from adapters.db.pool import ConnectionPool
from core.ledger.executor import LedgerExecutor
from core.ledger.schema import verify_ledger_schema
from web.models.responses import HealthResponse, PoolStatsResponse


def _file_size(path: Path) -> int:
    return path.stat().st_size


class HealthService:
    """헬스 체크 서비스"""

    def __init__(self, pool: ConnectionPool, executor: LedgerExecutor):
        self.pool = pool
        self.executor = executor

    async def check(self) -> HealthResponse:
        """서비스 상태 확인

        누락 테이블이 있으면 status="degraded".
        """
        missing = await self.executor.run(lambda store: verify_ledger_schema(store.db))

        db_size = None
        if self.pool.db_path is not None:
            db_size = await self.executor.run_blocking(_file_size, self.pool.db_path)

        stats = self.pool.stats
        return HealthResponse(
            status="degraded" if missing else "ok",
            db_file=self.pool.db_file,
            db_size_bytes=db_size,
            missing_tables=missing,
            pool=PoolStatsResponse(
                size=stats.size,
                open=stats.open,
                idle=stats.idle,
                in_use=stats.in_use,
            ),
        )
