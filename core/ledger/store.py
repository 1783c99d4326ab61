"""
Ledger 저장소

복식부기 거래/분개 저장 및 조회.
거래와 분개는 하나의 SQLite 트랜잭션으로 함께 저장된다.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

import aiosqlite

from core.ledger import queries
from core.ledger.errors import NotFound, StoreError, ValidationError
from core.ledger.types import (
    Account,
    AccountBalance,
    AccountKind,
    NewPosting,
    Posting,
    Transaction,
)

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

# SQLite INTEGER 범위 (8바이트 부호 있는 정수)
MIN_AMOUNT = -(2**63)
MAX_AMOUNT = 2**63 - 1


def _store_operation(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """aiosqlite 예외를 StoreError로 변환 (원인 보존)"""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except aiosqlite.IntegrityError as e:
            raise StoreError(f"{func.__name__}: constraint violation: {e}") from e
        except aiosqlite.Error as e:
            raise StoreError(f"{func.__name__} failed: {e}") from e
        except OverflowError as e:
            # SQLite INTEGER 범위를 벗어난 파라미터
            raise StoreError(f"{func.__name__}: value out of range: {e}") from e

    return wrapper


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _in_range(value: int) -> bool:
    return MIN_AMOUNT <= value <= MAX_AMOUNT


def validate_postings(postings: Sequence[NewPosting]) -> list[NewPosting]:
    """분개 목록 검증 (DB 접근 전)

    - 최소 2개 (복식부기)
    - 금액은 정수 (최소 통화 단위, bool/float 불가)
    - date는 datetime.date (datetime 불가)
    - 금액 합계 = 0

    Returns:
        검증된 분개 목록 (list 복사본)

    Raises:
        ValidationError: 위반 시
    """
    if postings is None or isinstance(postings, (str, bytes)):
        raise ValidationError("Postings must be a sequence")

    lines = list(postings)
    if len(lines) < 2:
        raise ValidationError(
            f"A transaction needs at least two postings, got {len(lines)}"
        )

    for i, line in enumerate(lines):
        if not isinstance(line, NewPosting):
            raise ValidationError(f"Posting #{i} is not a NewPosting")
        if not _is_int(line.account_id):
            raise ValidationError(f"Posting #{i}: account_id must be an integer")
        if not _in_range(line.account_id):
            raise ValidationError(f"Posting #{i}: account_id out of range")
        if not _is_int(line.amount):
            raise ValidationError(
                f"Posting #{i}: amount must be an integer in minor units"
            )
        if not _in_range(line.amount):
            raise ValidationError(f"Posting #{i}: amount out of range")
        if isinstance(line.date, datetime) or not isinstance(line.date, date):
            raise ValidationError(f"Posting #{i}: date must be a calendar date")

    total = sum(line.amount for line in lines)
    if total != 0:
        raise ValidationError(f"Unbalanced postings: amounts sum to {total}, expected 0")

    return lines


def _check_id(value: Any, label: str) -> None:
    """SQLite INTEGER 범위를 벗어난 id는 존재할 수 없으므로 NotFound"""
    if not _is_int(value) or not _in_range(value):
        raise NotFound(f"{label} {value} not found")


def _validate_text(value: Any, field_name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")


def _validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Account name must be a non-empty string")
    return name.strip()


class LedgerStore:
    """Ledger 저장소

    복식부기 거래를 저장하고 조회하는 클래스.
    잔액은 저장하지 않고 조회 시점에 postings에서 계산.

    Args:
        db: 대여받은 SQLite 어댑터 (호출 동안 독점 사용)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =========================================================================
    # 거래
    # =========================================================================

    @_store_operation
    async def create_transaction(
        self,
        payee: str | None,
        description: str | None,
        postings: Sequence[NewPosting],
    ) -> int:
        """거래 + 분개 저장

        검증은 DB 접근 전에 수행 (실패 시 아무것도 기록되지 않음).
        저장은 BEGIN IMMEDIATE 트랜잭션 하나로 처리: 전부 저장되거나 전부 취소.

        Args:
            payee: 거래 상대 (선택)
            description: 설명 (선택)
            postings: 분개 목록 (2개 이상, 합계 0)

        Returns:
            새 거래 id

        Raises:
            ValidationError: 불균형/빈 분개, 잘못된 타입
            NotFound: 존재하지 않는 계정 참조
            StoreError: DB 실패 (원인 보존)
        """
        _validate_text(payee, "payee")
        _validate_text(description, "description")
        lines = validate_postings(postings)

        async with self.db.transaction():
            await self._require_accounts({line.account_id for line in lines})

            cursor = await self.db.execute(
                "INSERT INTO transactions (payee, description) VALUES (?, ?)",
                (payee, description),
            )
            transaction_id = cursor.lastrowid

            await self.db.executemany(
                """
                INSERT INTO postings (date, amount, account_id, transaction_id)
                VALUES (?, ?, ?, ?)
                """,
                [
                    (line.date.isoformat(), line.amount, line.account_id, transaction_id)
                    for line in lines
                ],
            )

        logger.info(
            "거래 저장",
            extra={"transaction_id": transaction_id, "postings": len(lines)},
        )
        return transaction_id

    @_store_operation
    async def list_transactions(self) -> list[Transaction]:
        """거래 목록 조회 (id 오름차순, postings 미포함)"""
        return await queries.LIST_TRANSACTIONS.fetch_all(self.db)

    @_store_operation
    async def get_transaction(self, transaction_id: int) -> Transaction:
        """거래 단건 조회 (postings 포함)

        Raises:
            NotFound: 거래 없음
        """
        _check_id(transaction_id, "Transaction")

        async with self.db.transaction(immediate=False):
            txn = await queries.GET_TRANSACTION.fetch_one(self.db, (transaction_id,))
            if txn is None:
                raise NotFound(f"Transaction {transaction_id} not found")
            postings = await queries.LIST_POSTINGS.fetch_all(self.db, (transaction_id,))

        return Transaction(
            id=txn.id,
            payee=txn.payee,
            description=txn.description,
            postings=tuple(postings),
        )

    @_store_operation
    async def list_postings(self, transaction_id: int) -> list[Posting]:
        """거래의 분개 목록

        Raises:
            NotFound: 거래 없음
        """
        return list((await self.get_transaction(transaction_id)).postings)

    # =========================================================================
    # 계정
    # =========================================================================

    @_store_operation
    async def create_account(self, name: str, kind: AccountKind | int | str) -> int:
        """계정 생성 (관리 작업)

        Returns:
            새 계정 id

        Raises:
            ValidationError: 빈 이름, 알 수 없는 유형
        """
        clean_name = _validate_name(name)
        try:
            account_kind = AccountKind.parse(kind)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        async with self.db.transaction():
            cursor = await self.db.execute(
                "INSERT INTO accounts (name, kind) VALUES (?, ?)",
                (clean_name, int(account_kind)),
            )
            account_id = cursor.lastrowid

        logger.info(
            "계정 생성",
            extra={"account_id": account_id, "kind": account_kind.name},
        )
        return account_id

    @_store_operation
    async def rename_account(self, account_id: int, name: str) -> Account:
        """계정 이름 변경 (생성 후 바꿀 수 있는 유일한 필드)

        Raises:
            ValidationError: 빈 이름
            NotFound: 계정 없음
        """
        clean_name = _validate_name(name)
        _check_id(account_id, "Account")

        async with self.db.transaction():
            cursor = await self.db.execute(
                "UPDATE accounts SET name = ? WHERE id = ?",
                (clean_name, account_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(f"Account {account_id} not found")
            account = await queries.GET_ACCOUNT.fetch_one(self.db, (account_id,))

        if account is None:
            raise NotFound(f"Account {account_id} not found")
        return account

    @_store_operation
    async def get_account(self, account_id: int) -> Account:
        """계정 조회

        Raises:
            NotFound: 계정 없음
        """
        _check_id(account_id, "Account")
        account = await queries.GET_ACCOUNT.fetch_one(self.db, (account_id,))
        if account is None:
            raise NotFound(f"Account {account_id} not found")
        return account

    @_store_operation
    async def list_accounts(self) -> list[Account]:
        """계정 목록 (id 오름차순)"""
        return await queries.LIST_ACCOUNTS.fetch_all(self.db)

    @_store_operation
    async def get_account_balance(self, account_id: int) -> int:
        """계정 잔액 (postings 합계, 조회 시점 계산)

        Args:
            account_id: 계정 ID

        Returns:
            잔액 (분개 없으면 0)

        Raises:
            NotFound: 계정 없음
        """
        _check_id(account_id, "Account")

        async with self.db.transaction(immediate=False):
            if await queries.GET_ACCOUNT.fetch_one(self.db, (account_id,)) is None:
                raise NotFound(f"Account {account_id} not found")
            amounts = await queries.ACCOUNT_AMOUNTS.fetch_all(self.db, (account_id,))

        # SQLite SUM()은 중간 합계가 INTEGER 범위를 넘으면 실패하므로 Python에서 합산
        return sum(amounts)

    @_store_operation
    async def get_trial_balance(self) -> list[AccountBalance]:
        """시산표 조회

        모든 계정의 잔액 (id 오름차순). 균형 잡힌 원장이면 합계는 0.
        """
        async with self.db.transaction(immediate=False):
            accounts = await queries.LIST_ACCOUNTS.fetch_all(self.db)
            postings = await queries.POSTING_AMOUNTS.fetch_all(self.db)

        balances = dict.fromkeys((account.id for account in accounts), 0)
        for account_id, amount in postings:
            balances[account_id] += amount

        return [
            AccountBalance(
                account_id=account.id,
                name=account.name,
                kind=account.kind,
                balance=balances[account.id],
            )
            for account in accounts
        ]

    # =========================================================================
    # 내부
    # =========================================================================

    async def _require_accounts(self, account_ids: set[int]) -> None:
        """참조 계정 존재 확인 (트랜잭션 내부에서 호출)"""
        missing = []
        for account_id in sorted(account_ids):
            if await queries.GET_ACCOUNT.fetch_one(self.db, (account_id,)) is None:
                missing.append(account_id)

        if missing:
            raise NotFound(f"Account(s) not found: {', '.join(map(str, missing))}")
