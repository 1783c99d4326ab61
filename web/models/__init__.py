"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountRenameRequest,
    PostingRequest,
    TransactionCreateRequest,
)
from web.models.responses import (
    AccountBalanceResponse,
    AccountResponse,
    CreatedResponse,
    ErrorResponse,
    HealthResponse,
    PoolStatsResponse,
    PostingResponse,
    TransactionDetailResponse,
    TransactionResponse,
    TrialBalanceItemResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "AccountRenameRequest",
    "PostingRequest",
    "TransactionCreateRequest",
    # Responses
    "AccountBalanceResponse",
    "AccountResponse",
    "CreatedResponse",
    "ErrorResponse",
    "HealthResponse",
    "PoolStatsResponse",
    "PostingResponse",
    "TransactionDetailResponse",
    "TransactionResponse",
    "TrialBalanceItemResponse",
]
