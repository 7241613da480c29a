from unittest.mock import AsyncMock

import pytest

from src.service.seat_reservation.app.command.purchase_seat_use_case import PurchaseSeatUseCase
from src.service.seat_reservation.domain.enum.seat_status import SeatStatus
from src.service.seat_reservation.domain.seat_reservation_exceptions import (
    InvalidSeatIdError,
    LockStoreUnavailableError,
    OrderCommitError,
    SeatNotHeldError,
    SeatNotOwnedError,
)
from src.service.seat_reservation.domain.value_object.venue_layout import VenueLayout
from src.service.seat_reservation.driven_adapter.state.in_memory_seat_lock_store_impl import (
    InMemorySeatLockStoreImpl,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def use_case(
    lock_store: InMemorySeatLockStoreImpl,
    order_ledger_repo: AsyncMock,
    broadcaster: AsyncMock,
    venue_layout: VenueLayout,
) -> PurchaseSeatUseCase:
    return PurchaseSeatUseCase(
        seat_lock_store=lock_store,
        order_ledger_repo=order_ledger_repo,
        seat_event_broadcaster=broadcaster,
        venue_layout=venue_layout,
        default_price=100,
    )


class TestPurchaseSeat:
    @pytest.mark.asyncio
    async def test_holder_purchases_at_section_price(
        self,
        use_case: PurchaseSeatUseCase,
        lock_store: InMemorySeatLockStoreImpl,
        order_ledger_repo: AsyncMock,
        broadcaster: AsyncMock,
    ):
        # Given: alice holds a seat in section A (price 250)
        await lock_store.acquire(seat_id='r2-c5', holder_id='alice', ttl_seconds=60)

        # When
        result = await use_case.execute(seat_id='r2-c5', user_id='alice')

        # Then: order appended, lock removed, SOLD broadcast
        assert result.message == 'Purchase successful'
        order_ledger_repo.append.assert_awaited_once_with(
            seat_id='r2-c5', user_id='alice', amount=250
        )
        assert await lock_store.read(seat_id='r2-c5') is None
        event = broadcaster.broadcast_seat_update.await_args.kwargs['event']
        assert (event.seat_id, event.status, event.owner_id) == ('r2-c5', SeatStatus.SOLD, 'alice')

    @pytest.mark.asyncio
    async def test_seat_outside_sections_uses_default_price(
        self,
        use_case: PurchaseSeatUseCase,
        lock_store: InMemorySeatLockStoreImpl,
        order_ledger_repo: AsyncMock,
    ):
        await lock_store.acquire(seat_id='r9-c9', holder_id='alice', ttl_seconds=60)

        await use_case.execute(seat_id='r9-c9', user_id='alice')

        assert order_ledger_repo.append.await_args.kwargs['amount'] == 100

    @pytest.mark.asyncio
    async def test_unheld_seat_cannot_be_purchased(
        self, use_case: PurchaseSeatUseCase, order_ledger_repo: AsyncMock, broadcaster: AsyncMock
    ):
        with pytest.raises(SeatNotHeldError) as exc_info:
            await use_case.execute(seat_id='r1-c1', user_id='alice')

        assert exc_info.value.status_code == 403
        order_ledger_repo.append.assert_not_awaited()
        broadcaster.broadcast_seat_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_users_hold_cannot_be_purchased(
        self,
        use_case: PurchaseSeatUseCase,
        lock_store: InMemorySeatLockStoreImpl,
        order_ledger_repo: AsyncMock,
    ):
        await lock_store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)

        with pytest.raises(SeatNotOwnedError) as exc_info:
            await use_case.execute(seat_id='r1-c1', user_id='bob')

        assert exc_info.value.status_code == 403
        assert await lock_store.read(seat_id='r1-c1') == 'alice'
        order_ledger_repo.append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ledger_failure_keeps_lock_and_emits_nothing(
        self,
        use_case: PurchaseSeatUseCase,
        lock_store: InMemorySeatLockStoreImpl,
        order_ledger_repo: AsyncMock,
        broadcaster: AsyncMock,
    ):
        await lock_store.acquire(seat_id='r1-c1', holder_id='alice', ttl_seconds=60)
        order_ledger_repo.append.side_effect = OrderCommitError('db down')

        with pytest.raises(OrderCommitError) as exc_info:
            await use_case.execute(seat_id='r1-c1', user_id='alice')

        assert exc_info.value.status_code == 500
        assert await lock_store.read(seat_id='r1-c1') == 'alice'
        broadcaster.broadcast_seat_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lock_cleanup_failure_does_not_fail_committed_purchase(
        self, order_ledger_repo: AsyncMock, broadcaster: AsyncMock, venue_layout: VenueLayout
    ):
        store = AsyncMock()
        store.read.return_value = 'alice'
        store.delete.side_effect = LockStoreUnavailableError('down')
        use_case = PurchaseSeatUseCase(
            seat_lock_store=store,
            order_ledger_repo=order_ledger_repo,
            seat_event_broadcaster=broadcaster,
            venue_layout=venue_layout,
            default_price=100,
        )

        result = await use_case.execute(seat_id='r1-c1', user_id='alice')

        assert result.message == 'Purchase successful'
        broadcaster.broadcast_seat_update.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_order_is_written_before_lock_is_deleted(
        self, order_ledger_repo: AsyncMock, broadcaster: AsyncMock, venue_layout: VenueLayout
    ):
        calls: list[str] = []
        store = AsyncMock()
        store.read.return_value = 'alice'
        store.delete.side_effect = lambda **kwargs: calls.append('delete')
        order_ledger_repo.append.side_effect = lambda **kwargs: calls.append('append') or 7
        use_case = PurchaseSeatUseCase(
            seat_lock_store=store,
            order_ledger_repo=order_ledger_repo,
            seat_event_broadcaster=broadcaster,
            venue_layout=venue_layout,
            default_price=100,
        )

        await use_case.execute(seat_id='r1-c1', user_id='alice')

        assert calls == ['append', 'delete']

    @pytest.mark.asyncio
    async def test_malformed_seat_id(self, use_case: PurchaseSeatUseCase):
        with pytest.raises(InvalidSeatIdError):
            await use_case.execute(seat_id='', user_id='alice')
