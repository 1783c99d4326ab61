"""
pytest 공통 fixture 정의

임시 설정 파일, 파일 기반 SQLite 풀, Executor, 기본 계정
"""

import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from adapters.db.pool import ConnectionPool
from core.ledger.executor import LedgerExecutor
from core.ledger.types import AccountKind


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """테스트용 ledger.yaml 파일 생성"""
    config_content = """# 테스트용 ledger.yaml
address: 0.0.0.0
port: 4100
db_file: data/test_ledger.db
pool_size: 2
acquire_timeout: 0.5
"""
    config_path = temp_dir / "ledger.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path


@pytest_asyncio.fixture
async def pool(tmp_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """파일 DB 연결 풀 (스키마 초기화 완료)"""
    pool = ConnectionPool(tmp_path / "ledger.db", size=4, acquire_timeout=2.0)
    await pool.open()
    yield pool
    await pool.close()


@pytest.fixture
def executor(pool: ConnectionPool) -> LedgerExecutor:
    """LedgerExecutor 인스턴스"""
    return LedgerExecutor(pool)


@pytest_asyncio.fixture
async def accounts(executor: LedgerExecutor) -> dict[str, int]:
    """기본 계정 (Cash, Revenue, Expenses)"""
    cash = await executor.run(lambda s: s.create_account("Cash", AccountKind.ASSET))
    revenue = await executor.run(lambda s: s.create_account("Revenue", AccountKind.INCOME))
    expenses = await executor.run(lambda s: s.create_account("Expenses", AccountKind.EXPENSE))
    return {"cash": cash, "revenue": revenue, "expenses": expenses}
