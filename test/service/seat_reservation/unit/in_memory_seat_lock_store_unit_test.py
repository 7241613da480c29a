import pytest

from src.service.seat_reservation.driven_adapter.state.in_memory_seat_lock_store_impl import (
    InMemorySeatLockStoreImpl,
)


pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemorySeatLockStoreImpl:
    return InMemorySeatLockStoreImpl(clock=clock)


class TestAcquire:
    @pytest.mark.asyncio
    async def test_first_acquire_wins(self, store: InMemorySeatLockStoreImpl):
        assert await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)
        assert not await store.acquire(seat_id='r1-c1', holder_id='bob', ttl_seconds=60)
        assert await store.read(seat_id='r1-c1') == 'alice'

    @pytest.mark.asyncio
    async def test_same_holder_cannot_extend_by_reacquiring(
        self, store: InMemorySeatLockStoreImpl, clock: FakeClock
    ):
        await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)
        clock.advance(30)

        assert not await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)

        clock.advance(30)
        assert await store.read(seat_id='r1-c1') is None

    @pytest.mark.asyncio
    async def test_expired_lock_can_be_reacquired(
        self, store: InMemorySeatLockStoreImpl, clock: FakeClock
    ):
        await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)
        clock.advance(59)
        assert await store.read(seat_id='r1-c1') == 'alice'

        clock.advance(1)

        assert await store.read(seat_id='r1-c1') is None
        assert await store.acquire(seat_id='r1-c1', holder_id='bob', ttl_seconds=60)
        assert await store.read(seat_id='r1-c1') == 'bob'


class TestReleaseIfOwner:
    @pytest.mark.asyncio
    async def test_owner_releases(self, store: InMemorySeatLockStoreImpl):
        await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)

        assert await store.release_if_owner(seat_id='r1-c1', holder_id='alice')
        assert await store.read(seat_id='r1-c1') is None

    @pytest.mark.asyncio
    async def test_non_owner_cannot_release(self, store: InMemorySeatLockStoreImpl):
        await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)

        assert not await store.release_if_owner(seat_id='r1-c1', holder_id='bob')
        assert await store.read(seat_id='r1-c1') == 'alice'

    @pytest.mark.asyncio
    async def test_release_of_absent_lock_is_false(self, store: InMemorySeatLockStoreImpl):
        assert not await store.release_if_owner(seat_id='r1-c1', holder_id='alice')

    @pytest.mark.asyncio
    async def test_expired_lock_is_not_released(
        self, store: InMemorySeatLockStoreImpl, clock: FakeClock
    ):
        await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=1)
        clock.advance(2)

        assert not await store.release_if_owner(seat_id='r1-c1', holder_id='alice')


class TestDeleteAndList:
    @pytest.mark.asyncio
    async def test_delete_is_unconditional_and_idempotent(self, store: InMemorySeatLockStoreImpl):
        await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)

        await store.delete(seat_id='r1-c1')
        await store.delete(seat_id='r1-c1')

        assert await store.read(seat_id='r1-c1') is None

    @pytest.mark.asyncio
    async def test_list_skips_expired_and_filters_prefix(
        self, store: InMemorySeatLockStoreImpl, clock: FakeClock
    ):
        await store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)
        await store.acquire(seat_id='r1-c2', holder_id='bob', ttl_seconds=5)
        await store.acquire(seat_id='r2-c1', holder_id='carol', ttl_seconds=60)
        clock.advance(10)

        assert sorted(await store.list_by_prefix()) == [('r1-c1', 'alice'), ('r2-c1', 'carol')]
        assert await store.list_by_prefix(prefix='r2-') == [('r2-c1', 'carol')]
