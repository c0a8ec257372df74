"""Transaction manager stub implementation.

Simulates a database transaction's row-lock scope: locks taken through
MeetingRepositoryStub.lock_for_update are held until the transaction block
exits, then released. Writes are applied immediately and are not rolled
back on error.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar

from agvote.application.ports.transaction_manager import TransactionManagerProtocol

# Locks held by the transaction running in the current task, None outside one
_held_locks: ContextVar[list[asyncio.Lock] | None] = ContextVar(
    "held_row_locks", default=None
)


def held_locks() -> list[asyncio.Lock] | None:
    """Get the locks held by the current transaction, None outside one."""
    return _held_locks.get()


class TransactionManagerStub(TransactionManagerProtocol):
    """In-memory stub implementation of TransactionManagerProtocol.

    Nested transaction blocks join the outer one.

    Attributes:
        committed: Number of transactions that exited normally.
        rolled_back: Number of transactions that exited with an exception.
    """

    def __init__(self) -> None:
        self.committed = 0
        self.rolled_back = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if _held_locks.get() is not None:
            yield
            return

        locks: list[asyncio.Lock] = []
        token = _held_locks.set(locks)
        try:
            yield
        except BaseException:
            self.rolled_back += 1
            raise
        else:
            self.committed += 1
        finally:
            for lock in reversed(locks):
                lock.release()
            _held_locks.reset(token)
