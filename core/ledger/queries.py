"""
Ledger 조회 쿼리 정의

모든 조회는 RowQuery로 정의: SQL + 기대 컬럼 + 매퍼.
최초 실행 시 cursor.description을 기대 컬럼과 비교하고,
행은 위치가 아닌 컬럼 이름으로 매핑한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from core.ledger.errors import StoreError
from core.ledger.types import Account, AccountKind, Posting, Transaction

if TYPE_CHECKING:
    import aiosqlite

    from adapters.db.sqlite_adapter import SQLiteAdapter

T = TypeVar("T")


@dataclass
class RowQuery(Generic[T]):
    """컬럼 검증이 포함된 조회 쿼리

    Args:
        name: 로그/에러용 쿼리 이름
        sql: SELECT 문
        columns: 결과 컬럼 이름 (순서 포함)
        mapper: aiosqlite.Row → 도메인 객체
    """

    name: str
    sql: str
    columns: tuple[str, ...]
    mapper: Callable[[aiosqlite.Row], T]
    _validated: bool = field(default=False, init=False, repr=False, compare=False)

    def check_columns(self, description: Any) -> None:
        """결과 컬럼이 정의와 일치하는지 확인 (쿼리당 1회)

        Raises:
            StoreError: 컬럼 불일치
        """
        actual = tuple(col[0] for col in description or ())
        if actual != self.columns:
            raise StoreError(
                f"Query '{self.name}' returned columns {actual}, expected {self.columns}"
            )
        self._validated = True

    async def fetch_all(
        self,
        db: SQLiteAdapter,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[T]:
        cursor = await db.execute(self.sql, parameters)
        if not self._validated:
            self.check_columns(cursor.description)
        rows = await cursor.fetchall()
        return [self.mapper(row) for row in rows]

    async def fetch_one(
        self,
        db: SQLiteAdapter,
        parameters: tuple[Any, ...] | None = None,
    ) -> T | None:
        cursor = await db.execute(self.sql, parameters)
        if not self._validated:
            self.check_columns(cursor.description)
        row = await cursor.fetchone()
        return self.mapper(row) if row is not None else None


# =========================================================================
# 매퍼
# =========================================================================


def _to_account(row: aiosqlite.Row) -> Account:
    return Account(id=row["id"], name=row["name"], kind=AccountKind(row["kind"]))


def _to_transaction(row: aiosqlite.Row) -> Transaction:
    return Transaction(id=row["id"], payee=row["payee"], description=row["description"])


def _to_posting(row: aiosqlite.Row) -> Posting:
    return Posting(
        id=row["id"],
        date=date.fromisoformat(row["date"]),
        amount=row["amount"],
        account_id=row["account_id"],
        transaction_id=row["transaction_id"],
    )


# =========================================================================
# 쿼리 정의
# =========================================================================

# 목록 조회는 id 오름차순 (삽입 순서)으로 고정
LIST_TRANSACTIONS: RowQuery[Transaction] = RowQuery(
    name="list_transactions",
    sql="SELECT id, payee, description FROM transactions ORDER BY id",
    columns=("id", "payee", "description"),
    mapper=_to_transaction,
)

GET_TRANSACTION: RowQuery[Transaction] = RowQuery(
    name="get_transaction",
    sql="SELECT id, payee, description FROM transactions WHERE id = ?",
    columns=("id", "payee", "description"),
    mapper=_to_transaction,
)

LIST_POSTINGS: RowQuery[Posting] = RowQuery(
    name="list_postings",
    sql="""
        SELECT id, date, amount, account_id, transaction_id
        FROM postings
        WHERE transaction_id = ?
        ORDER BY id
    """,
    columns=("id", "date", "amount", "account_id", "transaction_id"),
    mapper=_to_posting,
)

LIST_ACCOUNTS: RowQuery[Account] = RowQuery(
    name="list_accounts",
    sql="SELECT id, name, kind FROM accounts ORDER BY id",
    columns=("id", "name", "kind"),
    mapper=_to_account,
)

GET_ACCOUNT: RowQuery[Account] = RowQuery(
    name="get_account",
    sql="SELECT id, name, kind FROM accounts WHERE id = ?",
    columns=("id", "name", "kind"),
    mapper=_to_account,
)

# 잔액 계산용 금액 조회 (합산은 LedgerStore에서)
ACCOUNT_AMOUNTS: RowQuery[int] = RowQuery(
    name="account_amounts",
    sql="SELECT amount FROM postings WHERE account_id = ?",
    columns=("amount",),
    mapper=lambda row: row["amount"],
)

POSTING_AMOUNTS: RowQuery[tuple[int, int]] = RowQuery(
    name="posting_amounts",
    sql="SELECT account_id, amount FROM postings",
    columns=("account_id", "amount"),
    mapper=lambda row: (row["account_id"], row["amount"]),
)
