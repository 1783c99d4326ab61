"""
복식부기 스키마 초기화

Web 시작 시 자동으로 Ledger 테이블 생성.
CREATE IF NOT EXISTS 패턴으로 여러 번 호출해도 안전하게 동작.
"""

import logging
from typing import TYPE_CHECKING

import aiosqlite

from core.ledger.errors import StoreError

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


LEDGER_TABLES: tuple[str, ...] = ("accounts", "transactions", "postings")


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화

    이미 존재하는 테이블과 데이터는 건드리지 않음 (IF NOT EXISTS).
    외래 키 관계를 선언하므로 foreign_keys=ON 연결에서 DB가 직접 참조 무결성을 보장.

    Args:
        db: 연결된 SQLiteAdapter

    Raises:
        StoreError: 테이블 생성 실패 (파일 쓰기 불가 등). 호출 측에서 기동 중단.
    """
    try:
        async with db.transaction():
            await _create_ledger_tables(db)
    except aiosqlite.Error as e:
        raise StoreError(f"Ledger schema initialization failed: {db.db_path}") from e

    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # accounts 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            name             TEXT NOT NULL CHECK (length(name) > 0),
            kind             INTEGER NOT NULL
        )
    """)

    # transactions 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            payee            TEXT,
            description      TEXT
        )
    """)

    # postings 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS postings (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            date             TEXT NOT NULL,
            amount           INTEGER NOT NULL,
            account_id       INTEGER NOT NULL,
            transaction_id   INTEGER NOT NULL,
            FOREIGN KEY (account_id) REFERENCES accounts(id),
            FOREIGN KEY (transaction_id) REFERENCES transactions(id)
        )
    """)

    # 인덱스 생성
    await db.execute("CREATE INDEX IF NOT EXISTS idx_postings_account ON postings(account_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_postings_transaction ON postings(transaction_id)")

    logger.debug("Ledger 테이블 생성 완료")


async def verify_ledger_schema(db: "SQLiteAdapter") -> list[str]:
    """누락된 Ledger 테이블 목록 반환 (정상이면 빈 리스트)"""
    missing = []
    for table in LEDGER_TABLES:
        if not await db.table_exists(table):
            missing.append(table)
    return missing
