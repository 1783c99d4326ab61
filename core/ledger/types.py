"""
복식부기 타입 정의

계정 유형 Enum과 Ledger 도메인 객체(Account, Transaction, Posting) 정의.
금액은 항상 최소 통화 단위의 정수 (부동소수점 사용 금지).
"""

from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum


class AccountKind(IntEnum):
    """계정 유형

    복식부기의 5대 계정 유형.
    DB에는 정수 코드로 저장.
    """

    ASSET = 1  # 자산
    LIABILITY = 2  # 부채
    EQUITY = 3  # 자본
    INCOME = 4  # 수익
    EXPENSE = 5  # 비용

    @classmethod
    def parse(cls, value: "AccountKind | int | str") -> "AccountKind":
        """정수 코드 또는 이름("asset", "ASSET")에서 변환

        Raises:
            ValueError: 알 수 없는 유형
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown account kind: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            name = value.strip().upper()
            if name.isdigit():
                return cls(int(name))
            try:
                return cls[name]
            except KeyError:
                raise ValueError(f"Unknown account kind: {value!r}") from None
        raise ValueError(f"Unknown account kind: {value!r}")


@dataclass(frozen=True)
class Account:
    """계정"""

    id: int
    name: str
    kind: AccountKind


@dataclass(frozen=True)
class Posting:
    """분개 항목 (저장된 행)

    하나의 거래에서 하나의 계정에 적용되는 부호 있는 금액.
    양수 = 차변, 음수 = 대변.
    """

    id: int
    date: date
    amount: int
    account_id: int
    transaction_id: int


@dataclass(frozen=True)
class Transaction:
    """거래

    목록 조회 시 postings는 비어 있음 (단건 조회에서만 채워짐).
    """

    id: int
    payee: str | None
    description: str | None
    postings: tuple[Posting, ...] = field(default=())


@dataclass(frozen=True)
class NewPosting:
    """생성 요청용 분개 항목 (id 미할당)"""

    account_id: int
    amount: int
    date: date


@dataclass(frozen=True)
class AccountBalance:
    """시산표 항목"""

    account_id: int
    name: str
    kind: AccountKind
    balance: int
