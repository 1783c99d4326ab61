"""
연결 풀 테스트

대여/반납, 고갈, 휘발성 저장소, 종료 동작 테스트.
"""

import asyncio
from pathlib import Path

import pytest

from adapters.db.pool import ConnectionPool, PoolStats
from core.ledger.errors import PoolExhausted, StoreError


class TestPoolConstruction:
    """생성 인자 검증"""

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_size(self, size: int) -> None:
        with pytest.raises(ValueError, match="size"):
            ConnectionPool("x.db", size=size)

    def test_invalid_timeout(self) -> None:
        with pytest.raises(ValueError, match="timeout"):
            ConnectionPool("x.db", acquire_timeout=0)

    def test_not_open_initially(self) -> None:
        pool = ConnectionPool("x.db")

        assert pool.is_open is False
        assert pool.db_path is None


class TestPoolOpen:
    """open/close 테스트"""

    @pytest.mark.asyncio
    async def test_open_creates_schema(self, tmp_path: Path) -> None:
        """open 시 Ledger 스키마 생성"""
        db_file = tmp_path / "ledger.db"

        async with ConnectionPool(db_file, size=2) as pool:
            assert pool.is_open is True
            assert pool.db_path == db_file
            async with pool.acquire() as db:
                assert await db.table_exists("accounts") is True
                assert await db.table_exists("transactions") is True
                assert await db.table_exists("postings") is True

        assert db_file.exists()
        assert pool.is_open is False

    @pytest.mark.asyncio
    async def test_open_twice(self, tmp_path: Path) -> None:
        pool = ConnectionPool(tmp_path / "ledger.db")
        await pool.open()
        await pool.open()

        assert pool.stats.open == 1

        await pool.close()

    @pytest.mark.asyncio
    async def test_reopen_after_close(self, tmp_path: Path) -> None:
        pool = ConnectionPool(tmp_path / "ledger.db")
        await pool.open()
        await pool.close()

        await pool.open()
        async with pool.acquire() as db:
            assert await db.table_exists("accounts") is True
        await pool.close()

    @pytest.mark.asyncio
    async def test_open_failure(self, tmp_path: Path) -> None:
        """DB를 열 수 없으면 StoreError, 풀은 닫힌 상태"""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file", encoding="utf-8")

        pool = ConnectionPool(blocker / "ledger.db")

        with pytest.raises(StoreError):
            await pool.open()

        assert pool.is_open is False

    @pytest.mark.asyncio
    async def test_memory_sentinel(self) -> None:
        """memory 센티널은 풀 수명 동안만 존재하는 임시 저장소"""
        pool = ConnectionPool("memory", size=2)
        assert pool.is_ephemeral is True

        await pool.open()
        db_path = pool.db_path
        assert db_path is not None
        assert db_path.exists()

        async with pool.acquire() as db:
            await db.execute("INSERT INTO accounts (name, kind) VALUES ('Cash', 1)")

        # 다른 연결에서도 같은 저장소가 보임
        async with pool.acquire() as db1, pool.acquire() as db2:
            row = await db2.fetchone("SELECT COUNT(*) AS n FROM accounts")
            assert row["n"] == 1
            assert db1 is not db2

        await pool.close()
        assert not db_path.parent.exists()

    @pytest.mark.asyncio
    async def test_acquire_after_close(self, tmp_path: Path) -> None:
        pool = ConnectionPool(tmp_path / "ledger.db")
        await pool.open()
        await pool.close()

        with pytest.raises(StoreError, match="not open"):
            async with pool.acquire():
                pass

    @pytest.mark.asyncio
    async def test_acquire_before_open(self, tmp_path: Path) -> None:
        pool = ConnectionPool(tmp_path / "ledger.db")

        with pytest.raises(StoreError):
            async with pool.acquire():
                pass


class TestPoolAcquire:
    """대여/반납 테스트"""

    @pytest.mark.asyncio
    async def test_reuses_connection(self, pool: ConnectionPool) -> None:
        """반납된 연결 재사용"""
        async with pool.acquire() as first:
            pass
        async with pool.acquire() as second:
            pass

        assert first is second
        assert pool.stats == PoolStats(size=4, open=1, idle=1, in_use=0)

    @pytest.mark.asyncio
    async def test_exclusive_checkout(self, pool: ConnectionPool) -> None:
        """동시에 대여한 연결은 서로 다름"""
        async with pool.acquire() as a, pool.acquire() as b:
            assert a is not b
            assert pool.stats.in_use == 2

        assert pool.stats.in_use == 0
        assert pool.stats.idle == 2

    @pytest.mark.asyncio
    async def test_released_on_error(self, pool: ConnectionPool) -> None:
        """예외 경로에서도 반납"""
        with pytest.raises(ValueError):
            async with pool.acquire():
                raise ValueError("boom")

        assert pool.stats.in_use == 0

    @pytest.mark.asyncio
    async def test_released_on_cancel(self, pool: ConnectionPool) -> None:
        """취소 경로에서도 반납"""
        held = asyncio.Event()

        async def holder() -> None:
            async with pool.acquire():
                held.set()
                await asyncio.sleep(10)

        task = asyncio.create_task(holder())
        await held.wait()
        assert pool.stats.in_use == 1

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert pool.stats.in_use == 0

    @pytest.mark.asyncio
    async def test_leftover_transaction_rolled_back(self, pool: ConnectionPool) -> None:
        """트랜잭션을 연 채로 반납하면 롤백"""
        async with pool.acquire() as db:
            await db.execute("BEGIN")
            await db.execute("INSERT INTO accounts (name, kind) VALUES ('Tmp', 1)")

        async with pool.acquire() as db:
            assert db.in_transaction is False
            row = await db.fetchone("SELECT COUNT(*) AS n FROM accounts")
            assert row["n"] == 0

    @pytest.mark.asyncio
    async def test_exhausted(self, tmp_path: Path) -> None:
        """모든 연결이 대여 중이면 PoolExhausted"""
        async with ConnectionPool(tmp_path / "ledger.db", size=1, acquire_timeout=0.1) as pool:
            async with pool.acquire():
                with pytest.raises(PoolExhausted):
                    async with pool.acquire():
                        pass

            # 반납 후에는 다시 대여 가능
            async with pool.acquire():
                assert pool.stats.in_use == 1

    @pytest.mark.asyncio
    async def test_waiter_gets_released_connection(self, tmp_path: Path) -> None:
        """대기자는 반납된 연결을 받음"""
        async with ConnectionPool(tmp_path / "ledger.db", size=1, acquire_timeout=2.0) as pool:
            release = asyncio.Event()

            async def holder() -> None:
                async with pool.acquire():
                    await release.wait()

            task = asyncio.create_task(holder())
            await asyncio.sleep(0.05)

            async def waiter() -> int:
                async with pool.acquire() as db:
                    row = await db.fetchone("SELECT 1 AS one")
                    return row["one"]

            waiting = asyncio.create_task(waiter())
            await asyncio.sleep(0.05)
            assert not waiting.done()

            release.set()
            assert await waiting == 1
            await task

    @pytest.mark.asyncio
    async def test_close_while_in_use(self, tmp_path: Path) -> None:
        """대여 중 close → 반납 시 연결 종료"""
        pool = ConnectionPool(tmp_path / "ledger.db", size=2)
        await pool.open()

        async with pool.acquire() as db:
            await pool.close()
            assert db.is_connected is True

        assert db.is_connected is False
        assert pool.stats.open == 0

    @pytest.mark.asyncio
    async def test_waiter_rejected_after_close(self) -> None:
        """대기 중에 close되면 대기자는 StoreError, 임시 저장소는 남지 않음"""
        pool = ConnectionPool("memory", size=1, acquire_timeout=2.0)
        await pool.open()
        db_path = pool.db_path
        assert db_path is not None

        held = asyncio.Event()
        release = asyncio.Event()

        async def holder() -> None:
            async with pool.acquire():
                held.set()
                await release.wait()

        async def waiter() -> None:
            async with pool.acquire():
                pass

        holding = asyncio.create_task(holder())
        await held.wait()
        waiting = asyncio.create_task(waiter())
        await asyncio.sleep(0.05)
        assert not waiting.done()

        await pool.close()
        release.set()
        await holding

        with pytest.raises(StoreError, match="not open"):
            await waiting

        assert not db_path.parent.exists()
        assert pool.stats == PoolStats(size=1, open=0, idle=0, in_use=0)
