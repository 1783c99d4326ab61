"""
복식부기 (Double-Entry Bookkeeping) 원장

거래(transactions)와 분개(postings)를 하나의 원자 단위로 저장하고
모든 거래의 분개 합계가 0이 되도록 보장.

사용 예시:
```python
from adapters.db.pool import ConnectionPool
from core.ledger import LedgerExecutor, NewPosting

# 초기화 (스키마 자동 생성)
pool = ConnectionPool("data/ledger.db")
await pool.open()
executor = LedgerExecutor(pool)

# 거래 생성
txn_id = await executor.run(
    lambda store: store.create_transaction(
        "Acme",
        "Sale",
        [
            NewPosting(account_id=1, amount=1000, date=today),
            NewPosting(account_id=2, amount=-1000, date=today),
        ],
    )
)

# 잔액 조회
balance = await executor.run(lambda store: store.get_account_balance(1))

await pool.close()
```
"""

from core.ledger.errors import (
    LedgerError,
    NotFound,
    PoolExhausted,
    StoreError,
    ValidationError,
)
from core.ledger.executor import LedgerExecutor
from core.ledger.store import LedgerStore, validate_postings
from core.ledger.types import (
    Account,
    AccountBalance,
    AccountKind,
    NewPosting,
    Posting,
    Transaction,
)

__all__ = [
    # 핵심 클래스
    "LedgerStore",
    "LedgerExecutor",
    "validate_postings",
    # 도메인 객체
    "Account",
    "AccountBalance",
    "Transaction",
    "Posting",
    "NewPosting",
    # Enum
    "AccountKind",
    # 예외
    "LedgerError",
    "ValidationError",
    "NotFound",
    "StoreError",
    "PoolExhausted",
]
