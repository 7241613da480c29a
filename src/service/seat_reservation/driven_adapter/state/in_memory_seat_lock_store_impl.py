"""
In-Memory Seat Lock Store

Same contract as the Redis store for a single process. No primitive awaits
between its check and its mutation, so each one is atomic on the event loop.
"""

import time
from typing import Callable, Optional

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.seat_reservation.app.interface.i_seat_lock_store import ISeatLockStore


@attrs.define
class _LockRecord:
    holder_id: str
    expires_at: float


class InMemorySeatLockStoreImpl(ISeatLockStore):
    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._locks: dict[str, _LockRecord] = {}

    def _live(self, seat_id: str) -> Optional[_LockRecord]:
        record = self._locks.get(seat_id)
        if record is not None and record.expires_at <= self._clock():
            del self._locks[seat_id]
            return None
        return record

    @Logger.io
    async def acquire(self, *, seat_id: str, holder_id: str, ttl_seconds: int) -> bool:
        if self._live(seat_id) is not None:
            return False
        self._locks[seat_id] = _LockRecord(
            holder_id=holder_id, expires_at=self._clock() + ttl_seconds
        )
        return True

    @Logger.io
    async def read(self, *, seat_id: str) -> Optional[str]:
        record = self._live(seat_id)
        return record.holder_id if record else None

    @Logger.io
    async def release_if_owner(self, *, seat_id: str, holder_id: str) -> bool:
        record = self._live(seat_id)
        if record is None or record.holder_id != holder_id:
            return False
        del self._locks[seat_id]
        return True

    @Logger.io
    async def delete(self, *, seat_id: str) -> None:
        self._locks.pop(seat_id, None)

    @Logger.io(truncate_content=True)
    async def list_by_prefix(self, *, prefix: str = '') -> list[tuple[str, str]]:
        locks = []
        for seat_id in list(self._locks):
            if not seat_id.startswith(prefix):
                continue
            record = self._live(seat_id)
            if record is not None:
                locks.append((seat_id, record.holder_id))
        return locks
