"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
"""

import datetime

from pydantic import BaseModel, Field

from core.ledger.types import Account, AccountBalance, Posting, Transaction


class TransactionResponse(BaseModel):
    """거래 목록 항목"""

    id: int = Field(..., description="거래 ID")
    payee: str | None = Field(default=None, description="거래 상대")
    description: str | None = Field(default=None, description="설명")

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionResponse":
        return cls(id=txn.id, payee=txn.payee, description=txn.description)


class CreatedResponse(BaseModel):
    """생성 응답 (새 id)"""

    id: int = Field(..., description="생성된 ID")


class PostingResponse(BaseModel):
    """분개 항목 응답"""

    id: int
    date: datetime.date
    amount: int
    account_id: int

    @classmethod
    def from_domain(cls, posting: Posting) -> "PostingResponse":
        return cls(
            id=posting.id,
            date=posting.date,
            amount=posting.amount,
            account_id=posting.account_id,
        )


class TransactionDetailResponse(TransactionResponse):
    """거래 단건 응답 (분개 포함)"""

    postings: list[PostingResponse] = Field(default_factory=list, description="분개 목록")

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionDetailResponse":
        return cls(
            id=txn.id,
            payee=txn.payee,
            description=txn.description,
            postings=[PostingResponse.from_domain(p) for p in txn.postings],
        )


class AccountResponse(BaseModel):
    """계정 응답"""

    id: int
    name: str
    kind: str = Field(..., description="계정 유형 (소문자)")

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        return cls(id=account.id, name=account.name, kind=account.kind.name.lower())


class AccountBalanceResponse(BaseModel):
    """계정 잔액 응답"""

    account_id: int
    balance: int = Field(..., description="잔액 (최소 통화 단위)")


class TrialBalanceItemResponse(BaseModel):
    """시산표 항목"""

    account_id: int
    name: str
    kind: str
    balance: int

    @classmethod
    def from_domain(cls, item: AccountBalance) -> "TrialBalanceItemResponse":
        return cls(
            account_id=item.account_id,
            name=item.name,
            kind=item.kind.name.lower(),
            balance=item.balance,
        )


class PoolStatsResponse(BaseModel):
    """연결 풀 상태"""

    size: int
    open: int
    idle: int
    in_use: int


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태 (ok/degraded)")
    db_file: str = Field(..., description="DB 파일 경로 또는 memory")
    db_size_bytes: int | None = Field(default=None, description="DB 파일 크기")
    missing_tables: list[str] = Field(default_factory=list, description="누락 테이블")
    pool: PoolStatsResponse


class ErrorDetail(BaseModel):
    """에러 상세"""

    kind: str
    message: str
    cause: str | None = None


class ErrorResponse(BaseModel):
    """에러 응답"""

    error: ErrorDetail
