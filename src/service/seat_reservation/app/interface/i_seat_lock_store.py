"""
Seat Lock Store Interface

Every primitive is a single atomic step against the store. Implementations
raise LockStoreUnavailableError when the store cannot be reached.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ISeatLockStore(ABC):
    @abstractmethod
    async def acquire(self, *, seat_id: str, holder_id: str, ttl_seconds: int) -> bool:
        """Create the lock only if no live lock exists. False means someone holds it."""
        pass

    @abstractmethod
    async def read(self, *, seat_id: str) -> Optional[str]:
        """Current holder, or None when the seat has no live lock"""
        pass

    @abstractmethod
    async def release_if_owner(self, *, seat_id: str, holder_id: str) -> bool:
        """Delete the lock only if `holder_id` owns it, compared and deleted in one step"""
        pass

    @abstractmethod
    async def delete(self, *, seat_id: str) -> None:
        """Unconditional delete. Callers must have verified ownership first."""
        pass

    @abstractmethod
    async def list_by_prefix(self, *, prefix: str = '') -> list[tuple[str, str]]:
        """(seat_id, holder_id) for every live lock whose seat id starts with `prefix`"""
        pass
