"""
Ledger Executor

요청 처리 경로에서 Ledger 작업을 분리해서 실행.
연결 대여 → LedgerStore 생성 → 작업 실행 → 반납.

SQL은 aiosqlite의 연결 전용 스레드에서 실행되고 결과는 asyncio future로 돌아오므로
DB 대기 중에도 다른 요청은 계속 처리된다.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

import aiosqlite

from core.ledger.errors import LedgerError, NotFound, StoreError, ValidationError
from core.ledger.store import LedgerStore

if TYPE_CHECKING:
    from adapters.db.pool import ConnectionPool

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerExecutor:
    """Ledger Executor

    Args:
        pool: 연결 풀 (시작 시 생성되어 전달됨)
        operation_timeout: 작업 제한 시간 (초, None이면 무제한)

    사용 예시:
    ```python
    executor = LedgerExecutor(pool)

    txn_id = await executor.run(
        lambda store: store.create_transaction("Acme", "Sale", postings)
    )
    ```

    취소: 호출 측 태스크가 취소되면 작업 내부로 CancelledError가 전파되어
    열린 트랜잭션은 롤백되고 연결은 풀로 반납된다.
    """

    def __init__(
        self,
        pool: ConnectionPool,
        operation_timeout: float | None = None,
    ):
        self.pool = pool
        self.operation_timeout = operation_timeout

        # 통계
        self._run_count = 0
        self._success_count = 0
        self._failed_count = 0

    async def run(self, operation: Callable[[LedgerStore], Awaitable[T]]) -> T:
        """Ledger 작업 실행

        Args:
            operation: LedgerStore를 받아 결과를 돌려주는 비동기 함수

        Returns:
            작업 결과

        Raises:
            PoolExhausted: 연결 대여 시간 초과
            ValidationError / NotFound: 작업이 발생시킨 도메인 예외 (그대로 전파)
            StoreError: DB 실패 또는 작업 시간 초과 (원인 보존)
        """
        self._run_count += 1

        try:
            async with self.pool.acquire() as db:
                store = LedgerStore(db)
                if self.operation_timeout is None:
                    result = await operation(store)
                else:
                    result = await asyncio.wait_for(
                        operation(store), timeout=self.operation_timeout
                    )
        except LedgerError as e:
            self._record_failure(e)
            raise
        except asyncio.TimeoutError as e:
            error = StoreError(f"Ledger operation timed out after {self.operation_timeout}s")
            error.__cause__ = e
            self._record_failure(error)
            raise error from e
        except aiosqlite.Error as e:
            error = StoreError(f"Ledger operation failed: {e}")
            error.__cause__ = e
            self._record_failure(error)
            raise error from e

        self._success_count += 1
        return result

    async def run_blocking(self, func: Callable[..., T], *args: Any) -> T:
        """동기 블로킹 함수를 기본 스레드 풀에서 실행

        파일 I/O 실패(OSError)는 StoreError로 변환.
        """
        try:
            return await asyncio.to_thread(func, *args)
        except OSError as e:
            raise StoreError(f"{getattr(func, '__name__', 'operation')} failed: {e}") from e

    def _record_failure(self, error: LedgerError) -> None:
        self._failed_count += 1

        if isinstance(error, (ValidationError, NotFound)):
            logger.debug(f"Ledger 요청 거부: {error.kind}: {error.message}")
        else:
            logger.warning(
                f"Ledger 작업 실패: {error.kind}: {error.message}",
                exc_info=error.__cause__ is not None and isinstance(error, StoreError),
            )

    @property
    def stats(self) -> dict[str, int]:
        """실행 통계"""
        return {
            "run_count": self._run_count,
            "success_count": self._success_count,
            "failed_count": self._failed_count,
        }
