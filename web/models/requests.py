"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
도메인 불변식(분개 합계 0, 최소 2개)은 LedgerStore에서 검증.
"""

import datetime

from pydantic import BaseModel, Field, StrictInt

from core.ledger.types import NewPosting


class PostingRequest(BaseModel):
    """분개 항목 요청"""

    account_id: StrictInt = Field(..., description="계정 ID")
    amount: StrictInt = Field(..., description="금액 (최소 통화 단위, 양수=차변 / 음수=대변)")
    date: datetime.date = Field(..., description="거래일 (YYYY-MM-DD)")

    def to_domain(self) -> NewPosting:
        return NewPosting(account_id=self.account_id, amount=self.amount, date=self.date)


class TransactionCreateRequest(BaseModel):
    """거래 생성 요청"""

    payee: str | None = Field(default=None, description="거래 상대")
    description: str | None = Field(default=None, description="설명")
    postings: list[PostingRequest] = Field(
        default_factory=list,
        description="분개 목록 (2개 이상, 금액 합계 0)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payee": "Acme",
                    "description": "Sale",
                    "postings": [
                        {"account_id": 1, "amount": 1000, "date": "2026-01-15"},
                        {"account_id": 2, "amount": -1000, "date": "2026-01-15"},
                    ],
                },
            ]
        }
    }


class AccountCreateRequest(BaseModel):
    """계정 생성 요청"""

    name: str = Field(..., description="계정 이름")
    kind: StrictInt | str = Field(..., description="계정 유형 (asset/liability/equity/income/expense 또는 코드)")


class AccountRenameRequest(BaseModel):
    """계정 이름 변경 요청"""

    name: str = Field(..., description="새 계정 이름")
