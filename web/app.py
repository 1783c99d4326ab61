"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
연결 풀은 lifespan에서 생성(open)하고 종료 시 close.
스키마 초기화 실패 시 예외가 전파되어 서버가 요청을 받지 않는다.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adapters.db.pool import ConnectionPool
from core.config.loader import LedgerConfig, get_settings
from core.ledger.executor import LedgerExecutor
from web.errors import register_exception_handlers
from web.routes import accounts, health, transactions

logger = logging.getLogger(__name__)

APP_VERSION = "0.2.0"


def create_app(config: LedgerConfig | None = None) -> FastAPI:
    """FastAPI 앱 생성

    Args:
        config: 서비스 설정 (None이면 ledger.yaml에서 로드)
    """
    if config is None:
        config = get_settings().config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 생명주기 관리"""
        pool = ConnectionPool(
            config.db_file,
            size=config.pool_size,
            acquire_timeout=config.acquire_timeout,
            busy_timeout_ms=config.busy_timeout_ms,
        )
        await pool.open()

        app.state.pool = pool
        app.state.executor = LedgerExecutor(pool)
        logger.info(
            "Ledger 서비스 시작",
            extra={"db_file": config.db_file, "pool_size": config.pool_size},
        )

        try:
            yield
        finally:
            # 종료 시 - 리소스 정리
            app.state.executor = None
            app.state.pool = None
            await pool.close()
            logger.info("Ledger 서비스 종료")

    app = FastAPI(
        title="Ledger API",
        description="복식부기 원장 API",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config

    register_exception_handlers(app)

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    app.include_router(health.router)
    app.include_router(transactions.router)
    app.include_router(accounts.router)

    return app
