"""
계정 라우트

계정 생성(관리 작업), 이름 변경, 잔액, 시산표
"""

from fastapi import APIRouter, Depends, status

from core.ledger.executor import LedgerExecutor
from web.dependencies import get_executor
from web.models.requests import AccountCreateRequest, AccountRenameRequest
from web.models.responses import (
    AccountBalanceResponse,
    AccountResponse,
    CreatedResponse,
    ErrorResponse,
    TrialBalanceItemResponse,
)
from web.services.account_service import AccountService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post(
    "/new",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_account(
    request: AccountCreateRequest,
    executor: LedgerExecutor = Depends(get_executor),
):
    """계정 생성"""
    service = AccountService(executor)
    account_id = await service.create_account(request.name, request.kind)
    return CreatedResponse(id=account_id)


@router.get("/list", response_model=list[AccountResponse])
async def list_accounts(
    executor: LedgerExecutor = Depends(get_executor),
):
    """계정 목록"""
    service = AccountService(executor)
    return [AccountResponse.from_domain(a) for a in await service.list_accounts()]


@router.get("/trial-balance", response_model=list[TrialBalanceItemResponse])
async def get_trial_balance(
    executor: LedgerExecutor = Depends(get_executor),
):
    """시산표 조회 (모든 계정, 합계 0)"""
    service = AccountService(executor)
    items = await service.get_trial_balance()
    return [TrialBalanceItemResponse.from_domain(item) for item in items]


@router.post(
    "/{account_id}/rename",
    response_model=AccountResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def rename_account(
    account_id: int,
    request: AccountRenameRequest,
    executor: LedgerExecutor = Depends(get_executor),
):
    """계정 이름 변경"""
    service = AccountService(executor)
    account = await service.rename_account(account_id, request.name)
    return AccountResponse.from_domain(account)


@router.get(
    "/{account_id}/balance",
    response_model=AccountBalanceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_account_balance(
    account_id: int,
    executor: LedgerExecutor = Depends(get_executor),
):
    """계정 잔액 (분개 합계)"""
    service = AccountService(executor)
    balance = await service.get_balance(account_id)
    return AccountBalanceResponse(account_id=account_id, balance=balance)
