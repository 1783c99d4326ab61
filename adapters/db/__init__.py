"""
데이터베이스 어댑터

SQLite WAL 모드 연결 및 연결 풀 관리.
"""

from adapters.db.pool import ConnectionPool, PoolStats
from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
)

__all__ = [
    "ConnectionPool",
    "PoolStats",
    "SQLiteAdapter",
    "create_connection",
]
