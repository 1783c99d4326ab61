"""
예외 → HTTP 응답 변환

LedgerError의 kind에 따라 상태 코드 선택.
응답 본문: {"error": {"kind", "message", "cause"}}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.ledger.errors import (
    LedgerError,
    NotFound,
    PoolExhausted,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)


STATUS_BY_ERROR: dict[type[LedgerError], int] = {
    ValidationError: 422,
    NotFound: 404,
    PoolExhausted: 503,
    StoreError: 500,
}


def status_for(error: LedgerError) -> int:
    """예외 타입에 맞는 HTTP 상태 코드 (미등록 타입은 500)"""
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return code
    return 500


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """LedgerError 핸들러"""
    code = status_for(exc)

    if code >= 500:
        logger.error(
            f"{request.method} {request.url.path} 실패: {exc.kind}: {exc.message}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )

    headers = {"Retry-After": "1"} if isinstance(exc, PoolExhausted) else None
    return JSONResponse(
        status_code=code,
        content={"error": exc.to_dict()},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """앱에 예외 핸들러 등록"""
    app.add_exception_handler(LedgerError, ledger_error_handler)
