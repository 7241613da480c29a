from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.seat_metrics import metrics
from src.service.seat_reservation.app.dto import SeatCommandResult
from src.service.seat_reservation.app.interface.i_order_ledger_repo import IOrderLedgerRepo
from src.service.seat_reservation.app.interface.i_seat_event_broadcaster import (
    ISeatEventBroadcaster,
)
from src.service.seat_reservation.app.interface.i_seat_lock_store import ISeatLockStore
from src.service.seat_reservation.domain.domain_event.seat_update_event import SeatUpdateEvent
from src.service.seat_reservation.domain.enum.seat_status import SeatStatus
from src.service.seat_reservation.domain.seat_reservation_exceptions import (
    LockStoreUnavailableError,
    SeatNotHeldError,
    SeatNotOwnedError,
)
from src.service.seat_reservation.domain.value_object.seat_id import SeatId
from src.service.seat_reservation.domain.value_object.venue_layout import VenueLayout


class PurchaseSeatUseCase:
    """
    Turn the caller's own hold into a sale.

    Flow:
    1. Verify the caller holds the seat
    2. Resolve the price from the venue layout
    3. Append the order (on failure the hold is left to expire or be retried)
    4. Delete the lock
    5. Broadcast SOLD

    The order is written before the lock is removed, so a crash in between
    leaves a sold seat with a stale lock (order wins on read) rather than an
    unowned seat with no order.
    """

    def __init__(
        self,
        *,
        seat_lock_store: ISeatLockStore,
        order_ledger_repo: IOrderLedgerRepo,
        seat_event_broadcaster: ISeatEventBroadcaster,
        venue_layout: VenueLayout,
        default_price: int,
    ) -> None:
        self.seat_lock_store = seat_lock_store
        self.order_ledger_repo = order_ledger_repo
        self.seat_event_broadcaster = seat_event_broadcaster
        self.venue_layout = venue_layout
        self.default_price = default_price
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        seat_lock_store: ISeatLockStore = Depends(Provide[Container.seat_lock_store]),
        order_ledger_repo: IOrderLedgerRepo = Depends(Provide[Container.order_ledger_repo]),
        seat_event_broadcaster: ISeatEventBroadcaster = Depends(
            Provide[Container.broadcast_hub]
        ),
        venue_layout: VenueLayout = Depends(Provide[Container.venue_layout]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            seat_lock_store=seat_lock_store,
            order_ledger_repo=order_ledger_repo,
            seat_event_broadcaster=seat_event_broadcaster,
            venue_layout=venue_layout,
            default_price=settings.DEFAULT_SEAT_PRICE,
        )

    @Logger.io
    async def execute(self, *, seat_id: str, user_id: str) -> SeatCommandResult:
        with (
            metrics.track_seat_command(operation='purchase'),
            self.tracer.start_as_current_span(
                'use_case.purchase_seat', attributes={'seat.id': seat_id, 'user.id': user_id}
            ) as span,
        ):
            seat = SeatId.parse(seat_id)

            holder = await self.seat_lock_store.read(seat_id=seat_id)
            if holder is None:
                raise SeatNotHeldError()
            if holder != user_id:
                raise SeatNotOwnedError()

            amount = self.venue_layout.resolve_price(seat, default_price=self.default_price)
            span.set_attribute('order.amount', amount)

            order_id = await self.order_ledger_repo.append(
                seat_id=seat_id, user_id=user_id, amount=amount
            )
            Logger.base.info(
                f'💰 [PURCHASE] Order {order_id}: {seat_id} sold to {user_id} for {amount}'
            )

            try:
                await self.seat_lock_store.delete(seat_id=seat_id)
            except LockStoreUnavailableError as e:
                # Sale is committed; the stale lock is shadowed by the order and expires
                Logger.base.warning(f'⚠️ [PURCHASE] Lock cleanup failed for {seat_id}: {e}')

            await self.seat_event_broadcaster.broadcast_seat_update(
                event=SeatUpdateEvent(seat_id=seat_id, status=SeatStatus.SOLD, owner_id=user_id)
            )
            return SeatCommandResult(seat_id=seat_id, message='Purchase successful')
