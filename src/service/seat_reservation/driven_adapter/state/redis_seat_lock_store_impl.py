"""
Redis Seat Lock Store

One key per held seat, value = holder id, TTL set on acquire.
- acquire: SET NX EX (single command)
- release_if_owner: Lua compare-and-delete
- list_by_prefix: SCAN (non-blocking) + one MGET
"""

from typing import Any, Optional

from opentelemetry import trace
from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.state.lua_script_executor import LuaScripts
from src.service.seat_reservation.app.interface.i_seat_lock_store import ISeatLockStore
from src.service.seat_reservation.domain.seat_reservation_exceptions import (
    LockStoreUnavailableError,
)
from src.service.seat_reservation.driven_adapter.state.key_str_generator import (
    make_seat_lock_key,
    make_seat_lock_match_pattern,
    parse_seat_id_from_lock_key,
)


RELEASE_IF_OWNER_SCRIPT = 'release_if_owner'


def _decode(value: Any) -> Any:
    return value.decode() if isinstance(value, bytes) else value


class RedisSeatLockStoreImpl(ISeatLockStore):
    def __init__(
        self,
        *,
        client: Redis,
        lua_scripts: LuaScripts,
        scan_count: int = settings.SEAT_LOCK_SCAN_COUNT,
    ) -> None:
        self.client = client
        self.lua_scripts = lua_scripts
        self.scan_count = scan_count
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def acquire(self, *, seat_id: str, holder_id: str, ttl_seconds: int) -> bool:
        key = make_seat_lock_key(seat_id=seat_id)
        try:
            acquired = await self.client.set(key, holder_id, nx=True, ex=ttl_seconds)
        except RedisError as e:
            raise LockStoreUnavailableError(f'Lock store unavailable: {e}') from e
        return bool(acquired)

    @Logger.io
    async def read(self, *, seat_id: str) -> Optional[str]:
        try:
            holder = await self.client.get(make_seat_lock_key(seat_id=seat_id))
        except RedisError as e:
            raise LockStoreUnavailableError(f'Lock store unavailable: {e}') from e
        return _decode(holder)

    @Logger.io
    async def release_if_owner(self, *, seat_id: str, holder_id: str) -> bool:
        try:
            deleted = await self.lua_scripts.execute(
                RELEASE_IF_OWNER_SCRIPT,
                client=self.client,
                keys=[make_seat_lock_key(seat_id=seat_id)],
                args=[holder_id],
            )
        except RedisError as e:
            raise LockStoreUnavailableError(f'Lock store unavailable: {e}') from e
        return int(deleted or 0) == 1

    @Logger.io
    async def delete(self, *, seat_id: str) -> None:
        try:
            await self.client.delete(make_seat_lock_key(seat_id=seat_id))
        except RedisError as e:
            raise LockStoreUnavailableError(f'Lock store unavailable: {e}') from e

    @Logger.io(truncate_content=True)
    async def list_by_prefix(self, *, prefix: str = '') -> list[tuple[str, str]]:
        with self.tracer.start_as_current_span(
            'lock_store.list_by_prefix', attributes={'seat.prefix': prefix}
        ) as span:
            try:
                keys: list[str] = []
                async for key in self.client.scan_iter(
                    match=make_seat_lock_match_pattern(seat_id_prefix=prefix),
                    count=self.scan_count,
                ):
                    keys.append(_decode(key))
                # SCAN may return a key more than once
                keys = list(dict.fromkeys(keys))
                if not keys:
                    span.set_attribute('lock.count', 0)
                    return []
                holders = await self.client.mget(keys)
            except RedisError as e:
                raise LockStoreUnavailableError(f'Lock store unavailable: {e}') from e

            locks: list[tuple[str, str]] = []
            for key, holder in zip(keys, holders, strict=True):
                seat_id = parse_seat_id_from_lock_key(key)
                # Expired between SCAN and MGET
                if seat_id is None or holder is None:
                    continue
                locks.append((seat_id, _decode(holder)))

            span.set_attribute('lock.count', len(locks))
            return locks
