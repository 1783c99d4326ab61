"""
거래 라우트

GET  /transactions/list  - 거래 목록
POST /transactions/new   - 거래 + 분개 생성
GET  /transactions/{id}  - 거래 단건 (분개 포함)
"""

from fastapi import APIRouter, Depends, status

from core.ledger.executor import LedgerExecutor
from web.dependencies import get_executor
from web.models.requests import TransactionCreateRequest
from web.models.responses import (
    CreatedResponse,
    ErrorResponse,
    TransactionDetailResponse,
    TransactionResponse,
)
from web.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("/list", response_model=list[TransactionResponse])
async def list_transactions(
    executor: LedgerExecutor = Depends(get_executor),
):
    """거래 목록 조회"""
    service = TransactionService(executor)
    transactions = await service.list_transactions()
    return [TransactionResponse.from_domain(t) for t in transactions]


@router.post(
    "/new",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse, "description": "존재하지 않는 계정"},
        422: {"model": ErrorResponse, "description": "불균형/빈 분개"},
        503: {"model": ErrorResponse, "description": "연결 풀 고갈"},
    },
)
async def create_transaction(
    request: TransactionCreateRequest,
    executor: LedgerExecutor = Depends(get_executor),
):
    """거래 생성

    분개 금액 합계가 0이 아니면 422, 아무것도 저장되지 않음.
    """
    service = TransactionService(executor)
    transaction_id = await service.create_transaction(request)
    return CreatedResponse(id=transaction_id)


@router.get(
    "/{transaction_id}",
    response_model=TransactionDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_transaction(
    transaction_id: int,
    executor: LedgerExecutor = Depends(get_executor),
):
    """거래 단건 조회 (분개 포함)"""
    service = TransactionService(executor)
    transaction = await service.get_transaction(transaction_id)
    return TransactionDetailResponse.from_domain(transaction)
