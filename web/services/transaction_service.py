"""
거래 서비스

LedgerExecutor를 통해 거래 생성/조회
"""

from core.ledger.executor import LedgerExecutor
from core.ledger.types import Transaction
from web.models.requests import TransactionCreateRequest


class TransactionService:
    """거래 서비스

    모든 DB 작업은 LedgerExecutor.run()으로 위임.
    """

    def __init__(self, executor: LedgerExecutor):
        self.executor = executor

    async def list_transactions(self) -> list[Transaction]:
        """거래 목록 조회 (id 오름차순)"""
        return await self.executor.run(lambda store: store.list_transactions())

    async def create_transaction(self, request: TransactionCreateRequest) -> int:
        """거래 + 분개 생성

        Returns:
            새 거래 id
        """
        postings = [p.to_domain() for p in request.postings]
        return await self.executor.run(
            lambda store: store.create_transaction(
                request.payee,
                request.description,
                postings,
            )
        )

    async def get_transaction(self, transaction_id: int) -> Transaction:
        """거래 단건 조회 (분개 포함)"""
        return await self.executor.run(
            lambda store: store.get_transaction(transaction_id)
        )
