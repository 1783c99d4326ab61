"""
계정 서비스

계정 생성/이름 변경/잔액/시산표
"""

from core.ledger.executor import LedgerExecutor
from core.ledger.types import Account, AccountBalance, AccountKind


class AccountService:
    """계정 서비스"""

    def __init__(self, executor: LedgerExecutor):
        self.executor = executor

    async def create_account(self, name: str, kind: AccountKind | int | str) -> int:
        return await self.executor.run(lambda store: store.create_account(name, kind))

    async def list_accounts(self) -> list[Account]:
        return await self.executor.run(lambda store: store.list_accounts())

    async def rename_account(self, account_id: int, name: str) -> Account:
        return await self.executor.run(
            lambda store: store.rename_account(account_id, name)
        )

    async def get_balance(self, account_id: int) -> int:
        return await self.executor.run(
            lambda store: store.get_account_balance(account_id)
        )

    async def get_trial_balance(self) -> list[AccountBalance]:
        return await self.executor.run(lambda store: store.get_trial_balance())
