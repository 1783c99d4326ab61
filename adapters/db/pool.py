"""
SQLite 연결 풀

단일 파일 DB에 대한 제한된 수의 재사용 연결 관리.
- 독점 대여: 한 연결은 동시에 한 호출자만 사용
- 대여 대기는 이벤트 루프를 막지 않음 (asyncio.Semaphore)
- 제한 시간 초과 시 PoolExhausted
- 성공/예외/취소 모든 경로에서 반납 보장
"""

import asyncio
import logging
import shutil
import tempfile
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import MEMORY_DB_SENTINEL, Defaults
from core.ledger.errors import PoolExhausted, StoreError
from core.ledger.schema import init_ledger_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolStats:
    """풀 상태 스냅샷"""

    size: int
    open: int
    idle: int
    in_use: int


class ConnectionPool:
    """SQLite 연결 풀

    프로세스 시작 시 open(), 종료 시 close().
    전역 인스턴스 없이 생성된 객체를 명시적으로 전달해서 사용.

    Args:
        db_file: DB 파일 경로 또는 "memory" (풀 수명 동안만 존재하는 휘발성 저장소)
        size: 최대 동시 연결 수
        acquire_timeout: 연결 대여 대기 시간 (초)
        busy_timeout_ms: SQLite 잠금 대기 시간 (밀리초)

    사용 예시:
    ```python
    pool = ConnectionPool("data/ledger.db", size=4)
    await pool.open()

    async with pool.acquire() as db:
        rows = await db.fetchall("SELECT ...")

    await pool.close()
    ```
    """

    def __init__(
        self,
        db_file: Path | str = Defaults.DB_FILE,
        size: int = Defaults.POOL_SIZE,
        acquire_timeout: float = Defaults.ACQUIRE_TIMEOUT_SEC,
        busy_timeout_ms: int = Defaults.BUSY_TIMEOUT_MS,
    ):
        if size < 1:
            raise ValueError(f"Pool size must be >= 1: {size}")
        if acquire_timeout <= 0:
            raise ValueError(f"Acquire timeout must be > 0: {acquire_timeout}")

        self.db_file = str(db_file)
        self.size = size
        self.acquire_timeout = acquire_timeout
        self.busy_timeout_ms = busy_timeout_ms

        self._db_path: Path | None = None
        self._temp_dir: Path | None = None
        self._slots: asyncio.Semaphore | None = None
        self._idle: deque[SQLiteAdapter] = deque()
        self._open_count = 0
        self._in_use = 0
        self._closed = False

    @property
    def is_ephemeral(self) -> bool:
        """휘발성 저장소 여부"""
        return self.db_file == MEMORY_DB_SENTINEL

    @property
    def db_path(self) -> Path | None:
        """실제 DB 파일 경로 (open 전에는 None)"""
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._slots is not None and not self._closed

    @property
    def stats(self) -> PoolStats:
        return PoolStats(
            size=self.size,
            open=self._open_count,
            idle=len(self._idle),
            in_use=self._in_use,
        )

    async def open(self) -> None:
        """풀 초기화 + 스키마 확인

        스키마 초기화 실패는 치명적 (예외 전파, 풀은 닫힌 상태로 정리).

        Raises:
            StoreError: DB 열기/스키마 생성 실패
        """
        if self.is_open:
            return

        if self.is_ephemeral:
            self._temp_dir = Path(tempfile.mkdtemp(prefix="ledger-"))
            self._db_path = self._temp_dir / "ledger.db"
        else:
            self._db_path = Path(self.db_file)

        self._slots = asyncio.Semaphore(self.size)
        self._closed = False

        try:
            async with self.acquire() as db:
                await init_ledger_schema(db)
        except BaseException:
            await self.close()
            self._slots = None
            raise

        logger.info(
            "연결 풀 초기화 완료",
            extra={"db_path": str(self._db_path), "size": self.size},
        )

    async def close(self) -> None:
        """유휴 연결 모두 종료

        대여 중인 연결은 반납 시점에 종료됨.
        """
        self._closed = True

        while self._idle:
            adapter = self._idle.popleft()
            await self._discard(adapter)

        if self._temp_dir is not None and self._in_use == 0:
            shutil.rmtree(self._temp_dir, ignore_errors=True)
            self._temp_dir = None

        logger.info("연결 풀 종료", extra={"db_path": str(self._db_path)})

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[SQLiteAdapter]:
        """연결 대여 (async context manager)

        Raises:
            PoolExhausted: acquire_timeout 내에 연결을 얻지 못한 경우
            StoreError: 풀이 열려 있지 않거나 연결 생성 실패
        """
        adapter = await self._checkout()
        try:
            yield adapter
        finally:
            await self._release(adapter)

    async def _checkout(self) -> SQLiteAdapter:
        slots = self._slots
        if slots is None or self._closed:
            raise StoreError("Connection pool is not open")

        try:
            await asyncio.wait_for(slots.acquire(), timeout=self.acquire_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "연결 풀 고갈",
                extra={"size": self.size, "timeout": self.acquire_timeout},
            )
            raise PoolExhausted(
                f"No connection available within {self.acquire_timeout}s "
                f"(pool size {self.size})"
            ) from None

        # 대기 중에 close()된 경우 (memory 저장소 디렉토리는 이미 삭제됨)
        if self._closed or slots is not self._slots:
            slots.release()
            raise StoreError("Connection pool is not open")

        try:
            adapter = self._idle.popleft() if self._idle else await self._create()
        except BaseException:
            slots.release()
            raise

        self._in_use += 1
        return adapter

    async def _create(self) -> SQLiteAdapter:
        assert self._db_path is not None
        adapter = SQLiteAdapter(self._db_path, busy_timeout_ms=self.busy_timeout_ms)
        await adapter.connect()
        self._open_count += 1
        return adapter

    async def _release(self, adapter: SQLiteAdapter) -> None:
        assert self._slots is not None
        self._in_use -= 1

        try:
            if adapter.is_healthy and adapter.in_transaction:
                # 트랜잭션 컨텍스트 밖에서 남은 트랜잭션은 버림
                await adapter.rollback()

            if self._closed or not adapter.is_healthy:
                await self._discard(adapter)
            else:
                self._idle.append(adapter)
        except Exception:
            logger.exception("연결 반납 실패", extra={"db_path": str(self._db_path)})
            await self._discard(adapter)
        finally:
            self._slots.release()

        if self._closed and self._in_use == 0 and self._temp_dir is not None:
            shutil.rmtree(self._temp_dir, ignore_errors=True)
            self._temp_dir = None

    async def _discard(self, adapter: SQLiteAdapter) -> None:
        if adapter.is_connected:
            self._open_count -= 1
        try:
            await adapter.close()
        except Exception:
            logger.exception("연결 종료 실패", extra={"db_path": str(self._db_path)})

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "ConnectionPool":
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
