"""Transaction manager port."""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Protocol


class TransactionManagerProtocol(Protocol):
    """Protocol for opening a unit of work against shared storage.

    Row locks acquired inside the transaction (see
    MeetingRepositoryProtocol.lock_for_update) are held until it exits.
    Leaving the block with an exception rolls the transaction back.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open a transaction, used as ``async with tx.transaction():``."""
        ...
