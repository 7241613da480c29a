from unittest.mock import AsyncMock

import anyio
import pytest

from src.service.seat_reservation.app.command.hold_seat_use_case import HoldSeatUseCase
from src.service.seat_reservation.domain.domain_event.seat_update_event import SeatUpdateEvent
from src.service.seat_reservation.domain.entity.order_entity import OrderEntity
from src.service.seat_reservation.domain.enum.seat_status import SeatStatus
from src.service.seat_reservation.domain.seat_reservation_exceptions import (
    InvalidSeatIdError,
    LockStoreUnavailableError,
    OrderLedgerUnavailableError,
    SeatAlreadyHeldError,
    SeatAlreadySoldError,
)
from src.service.seat_reservation.driven_adapter.state.in_memory_seat_lock_store_impl import (
    InMemorySeatLockStoreImpl,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def use_case(
    lock_store: InMemorySeatLockStoreImpl, order_ledger_repo: AsyncMock, broadcaster: AsyncMock
) -> HoldSeatUseCase:
    return HoldSeatUseCase(
        seat_lock_store=lock_store,
        order_ledger_repo=order_ledger_repo,
        seat_event_broadcaster=broadcaster,
        hold_ttl_seconds=60,
    )


class TestHoldSeat:
    @pytest.mark.asyncio
    async def test_hold_available_seat(
        self,
        use_case: HoldSeatUseCase,
        lock_store: InMemorySeatLockStoreImpl,
        broadcaster: AsyncMock,
    ):
        # When
        result = await use_case.execute(seat_id='r1-c1', user_id='alice')

        # Then: lock written and exactly one HELD broadcast
        assert result.message == 'Seat held successfully'
        assert result.changed
        assert await lock_store.read(seat_id='r1-c1') == 'alice'
        broadcaster.broadcast_seat_update.assert_awaited_once()
        event: SeatUpdateEvent = broadcaster.broadcast_seat_update.await_args.kwargs['event']
        assert (event.seat_id, event.status, event.owner_id) == ('r1-c1', SeatStatus.HELD, 'alice')

    @pytest.mark.asyncio
    async def test_second_hold_conflicts_without_broadcast(
        self, use_case: HoldSeatUseCase, lock_store: InMemorySeatLockStoreImpl, broadcaster: AsyncMock
    ):
        await use_case.execute(seat_id='r1-c1', user_id='alice')
        broadcaster.reset_mock()

        with pytest.raises(SeatAlreadyHeldError) as exc_info:
            await use_case.execute(seat_id='r1-c1', user_id='bob')

        assert exc_info.value.status_code == 409
        assert await lock_store.read(seat_id='r1-c1') == 'alice'
        broadcaster.broadcast_seat_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_holder_rehold_also_conflicts(self, use_case: HoldSeatUseCase):
        await use_case.execute(seat_id='r1-c1', user_id='alice')

        with pytest.raises(SeatAlreadyHeldError):
            await use_case.execute(seat_id='r1-c1', user_id='alice')

    @pytest.mark.asyncio
    async def test_sold_seat_cannot_be_held(
        self,
        use_case: HoldSeatUseCase,
        order_ledger_repo: AsyncMock,
        lock_store: InMemorySeatLockStoreImpl,
        broadcaster: AsyncMock,
    ):
        order_ledger_repo.find_by_seat_id.return_value = OrderEntity(
            seat_id='r1-c1', user_id='alice', amount=100, id=1
        )

        with pytest.raises(SeatAlreadySoldError) as exc_info:
            await use_case.execute(seat_id='r1-c1', user_id='bob')

        assert exc_info.value.status_code == 409
        assert await lock_store.read(seat_id='r1-c1') is None
        broadcaster.broadcast_seat_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ledger_outage_still_holds_on_lock(
        self,
        use_case: HoldSeatUseCase,
        order_ledger_repo: AsyncMock,
        lock_store: InMemorySeatLockStoreImpl,
        broadcaster: AsyncMock,
    ):
        order_ledger_repo.find_by_seat_id.side_effect = OrderLedgerUnavailableError('db down')

        result = await use_case.execute(seat_id='r1-c1', user_id='alice')

        assert result.message == 'Seat held successfully'
        assert await lock_store.read(seat_id='r1-c1') == 'alice'
        broadcaster.broadcast_seat_update.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ledger_outage_keeps_mutual_exclusion(
        self, use_case: HoldSeatUseCase, order_ledger_repo: AsyncMock
    ):
        order_ledger_repo.find_by_seat_id.side_effect = OrderLedgerUnavailableError('db down')
        await use_case.execute(seat_id='r1-c1', user_id='alice')

        with pytest.raises(SeatAlreadyHeldError):
            await use_case.execute(seat_id='r1-c1', user_id='bob')

    @pytest.mark.asyncio
    async def test_malformed_seat_id_touches_nothing(
        self, use_case: HoldSeatUseCase, order_ledger_repo: AsyncMock, broadcaster: AsyncMock
    ):
        with pytest.raises(InvalidSeatIdError):
            await use_case.execute(seat_id='seat-1', user_id='alice')

        order_ledger_repo.find_by_seat_id.assert_not_awaited()
        broadcaster.broadcast_seat_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lock_store_failure_propagates(
        self, order_ledger_repo: AsyncMock, broadcaster: AsyncMock
    ):
        failing_store = AsyncMock()
        failing_store.acquire.side_effect = LockStoreUnavailableError('down')
        use_case = HoldSeatUseCase(
            seat_lock_store=failing_store,
            order_ledger_repo=order_ledger_repo,
            seat_event_broadcaster=broadcaster,
            hold_ttl_seconds=60,
        )

        with pytest.raises(LockStoreUnavailableError):
            await use_case.execute(seat_id='r1-c1', user_id='alice')

        broadcaster.broadcast_seat_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_passes_configured_ttl(
        self, order_ledger_repo: AsyncMock, broadcaster: AsyncMock
    ):
        store = AsyncMock()
        store.acquire.return_value = True
        use_case = HoldSeatUseCase(
            seat_lock_store=store,
            order_ledger_repo=order_ledger_repo,
            seat_event_broadcaster=broadcaster,
            hold_ttl_seconds=15,
        )

        await use_case.execute(seat_id='r1-c1', user_id='alice')

        store.acquire.assert_awaited_once_with(seat_id='r1-c1', holder_id='alice', ttl_seconds=15)


class TestConcurrentHolds:
    @pytest.mark.asyncio
    async def test_exactly_one_of_many_concurrent_holds_wins(
        self, use_case: HoldSeatUseCase, lock_store: InMemorySeatLockStoreImpl, broadcaster: AsyncMock
    ):
        winners: list[str] = []
        losers: list[str] = []

        async def attempt(user_id: str) -> None:
            try:
                await use_case.execute(seat_id='r2-c2', user_id=user_id)
                winners.append(user_id)
            except SeatAlreadyHeldError:
                losers.append(user_id)

        async with anyio.create_task_group() as tg:
            for i in range(20):
                tg.start_soon(attempt, f'user-{i}')

        assert len(winners) == 1
        assert len(losers) == 19
        assert await lock_store.read(seat_id='r2-c2') == winners[0]
        assert broadcaster.broadcast_seat_update.await_count == 1
