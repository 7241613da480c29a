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
    OrderLedgerUnavailableError,
    SeatAlreadyHeldError,
    SeatAlreadySoldError,
)
from src.service.seat_reservation.domain.value_object.seat_id import SeatId


class HoldSeatUseCase:
    """
    Place a time-bounded hold on one seat for one user.

    Flow:
    1. Validate seat id
    2. Refuse if the ledger already sold the seat (skipped while the ledger is down)
    3. SET NX EX on the lock store (the only point of mutual exclusion)
    4. Broadcast HELD
    """

    def __init__(
        self,
        *,
        seat_lock_store: ISeatLockStore,
        order_ledger_repo: IOrderLedgerRepo,
        seat_event_broadcaster: ISeatEventBroadcaster,
        hold_ttl_seconds: int,
    ) -> None:
        self.seat_lock_store = seat_lock_store
        self.order_ledger_repo = order_ledger_repo
        self.seat_event_broadcaster = seat_event_broadcaster
        self.hold_ttl_seconds = hold_ttl_seconds
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
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            seat_lock_store=seat_lock_store,
            order_ledger_repo=order_ledger_repo,
            seat_event_broadcaster=seat_event_broadcaster,
            hold_ttl_seconds=settings.SEAT_HOLD_TTL_SECONDS,
        )

    @Logger.io
    async def execute(self, *, seat_id: str, user_id: str) -> SeatCommandResult:
        with (
            metrics.track_seat_command(operation='hold'),
            self.tracer.start_as_current_span(
                'use_case.hold_seat', attributes={'seat.id': seat_id, 'user.id': user_id}
            ),
        ):
            SeatId.parse(seat_id)

            if await self._is_sold(seat_id=seat_id):
                raise SeatAlreadySoldError()

            acquired = await self.seat_lock_store.acquire(
                seat_id=seat_id, holder_id=user_id, ttl_seconds=self.hold_ttl_seconds
            )
            if not acquired:
                raise SeatAlreadyHeldError()

            Logger.base.info(
                f'🔒 [HOLD] {seat_id} held by {user_id} for {self.hold_ttl_seconds}s'
            )
            await self.seat_event_broadcaster.broadcast_seat_update(
                event=SeatUpdateEvent(seat_id=seat_id, status=SeatStatus.HELD, owner_id=user_id)
            )
            return SeatCommandResult(seat_id=seat_id, message='Seat held successfully')

    async def _is_sold(self, *, seat_id: str) -> bool:
        """
        Best-effort; the ledger's unique seat constraint is the durable guarantee.

        A purchase committing between this check and acquire still lets the
        hold through, so observers may see HELD after SOLD for that seat. The
        listing keeps reporting SOLD and the stray lock expires with its TTL.
        """
        try:
            return await self.order_ledger_repo.find_by_seat_id(seat_id=seat_id) is not None
        except OrderLedgerUnavailableError as e:
            Logger.base.warning(f'⚠️ [HOLD] Ledger unreadable, holding {seat_id} on lock alone: {e}')
            return False
