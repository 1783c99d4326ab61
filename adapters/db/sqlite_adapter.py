"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
aiosqlite는 연결마다 전용 스레드에서 SQL을 실행하므로
DB I/O가 이벤트 루프를 막지 않는다.

주의: 모든 연결은 외래 키 제약이 켜진 상태여야 함 (확인 실패 시 즉시 예외)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Defaults
from core.ledger.errors import StoreError

logger = logging.getLogger(__name__)


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
    busy_timeout_ms: int = Defaults.BUSY_TIMEOUT_MS,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드, 외래 키 제약 활성화)

    트랜잭션은 SQLiteAdapter.transaction()에서 명시적으로 시작하므로
    isolation_level=None (autocommit)으로 연결.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부
        busy_timeout_ms: 잠금 대기 시간 (밀리초)

    Returns:
        aiosqlite 연결 객체

    Raises:
        StoreError: 연결 실패 또는 외래 키 제약을 켤 수 없는 경우
    """
    # pathlib.Path를 문자열로 변환
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StoreError(f"Cannot create database directory: {db_path_str}") from e

    try:
        if readonly:
            conn = await aiosqlite.connect(
                f"file:{db_path_str}?mode=ro", uri=True, isolation_level=None
            )
        else:
            conn = await aiosqlite.connect(db_path_str, isolation_level=None)
    except aiosqlite.Error as e:
        raise StoreError(f"Cannot open database: {db_path_str}") from e

    try:
        conn.row_factory = aiosqlite.Row

        # 잠금 대기 설정이 WAL 전환보다 먼저
        await conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        if not readonly:
            await conn.execute("PRAGMA journal_mode=WAL")

        # 외래 키 제약 활성화 후 실제 적용 여부 확인
        await conn.execute("PRAGMA foreign_keys=ON")
        cursor = await conn.execute("PRAGMA foreign_keys")
        row = await cursor.fetchone()
        if row is None or row[0] != 1:
            raise StoreError("SQLite build does not enforce foreign keys")
    except BaseException as e:
        await conn.close()
        if isinstance(e, aiosqlite.Error):
            raise StoreError(f"Connection setup failed: {db_path_str}") from e
        raise

    logger.debug(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    하나의 물리 연결을 감싸고 트랜잭션 컨텍스트 매니저 제공.
    ConnectionPool이 이 객체 단위로 대여/반납한다.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부
        busy_timeout_ms: 잠금 대기 시간 (밀리초)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        async with db.transaction():
            await db.execute("INSERT INTO ...")
    ```
    """

    def __init__(
        self,
        db_path: Path | str,
        readonly: bool = False,
        busy_timeout_ms: int = Defaults.BUSY_TIMEOUT_MS,
    ):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self.busy_timeout_ms = busy_timeout_ms
        self._conn: aiosqlite.Connection | None = None
        self._broken = False

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def is_healthy(self) -> bool:
        """재사용 가능 여부 (롤백 실패 시 False)"""
        return self._conn is not None and not self._broken

    @property
    def in_transaction(self) -> bool:
        return self._conn is not None and self._conn.in_transaction

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(
            self.db_path, self.readonly, self.busy_timeout_ms
        )
        self._broken = False

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.debug("SQLite 연결 종료", extra={"db_path": str(self.db_path)})

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        conn = self._require_conn()

        if parameters:
            return await conn.execute(sql, parameters)
        return await conn.execute(sql)

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        """SQL 다중 실행"""
        return await self._require_conn().executemany(sql, parameters)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Row | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[aiosqlite.Row]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self, immediate: bool = True) -> AsyncIterator["SQLiteAdapter"]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외/취소 시 자동 롤백.
        immediate=True면 BEGIN IMMEDIATE로 시작하여 쓰기 잠금을 먼저 잡는다
        (다른 쓰기 트랜잭션의 중간 상태를 관찰하지 않음).

        사용 예시:
        ```python
        async with adapter.transaction():
            await adapter.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        conn = self._require_conn()
        if conn.in_transaction:
            raise RuntimeError("Transaction already in progress")

        await conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")

        try:
            yield self
            await conn.commit()
        except BaseException:
            try:
                await conn.rollback()
            except Exception:
                # 롤백 실패한 연결은 풀에 돌려보내지 않음
                self._broken = True
                logger.exception("롤백 실패", extra={"db_path": str(self.db_path)})
            raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    async def get_table_info(self, table_name: str) -> list[dict[str, Any]]:
        """테이블 정보 조회"""
        rows = await self.fetchall(f"PRAGMA table_info({table_name})")

        return [
            {
                "cid": row["cid"],
                "name": row["name"],
                "type": row["type"],
                "notnull": bool(row["notnull"]),
                "default_value": row["dflt_value"],
                "pk": bool(row["pk"]),
            }
            for row in rows
        ]

    async def get_foreign_keys(self, table_name: str) -> list[dict[str, Any]]:
        """외래 키 목록 조회"""
        rows = await self.fetchall(f"PRAGMA foreign_key_list({table_name})")

        return [
            {"from": row["from"], "table": row["table"], "to": row["to"]}
            for row in rows
        ]

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
