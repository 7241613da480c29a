from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

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
from src.service.seat_reservation.domain.seat_reservation_exceptions import SeatNotOwnedError
from src.service.seat_reservation.domain.value_object.seat_id import SeatId


class ReleaseSeatUseCase:
    """
    Give up a hold before it expires.

    Only the holder can release. Releasing a seat nobody holds is a no-op
    success, unless the seat has been sold.
    """

    def __init__(
        self,
        *,
        seat_lock_store: ISeatLockStore,
        order_ledger_repo: IOrderLedgerRepo,
        seat_event_broadcaster: ISeatEventBroadcaster,
    ) -> None:
        self.seat_lock_store = seat_lock_store
        self.order_ledger_repo = order_ledger_repo
        self.seat_event_broadcaster = seat_event_broadcaster
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
    ) -> Self:
        return cls(
            seat_lock_store=seat_lock_store,
            order_ledger_repo=order_ledger_repo,
            seat_event_broadcaster=seat_event_broadcaster,
        )

    @Logger.io
    async def execute(self, *, seat_id: str, user_id: str) -> SeatCommandResult:
        with (
            metrics.track_seat_command(operation='release'),
            self.tracer.start_as_current_span(
                'use_case.release_seat', attributes={'seat.id': seat_id, 'user.id': user_id}
            ),
        ):
            SeatId.parse(seat_id)

            if await self.seat_lock_store.release_if_owner(seat_id=seat_id, holder_id=user_id):
                Logger.base.info(f'🔓 [RELEASE] {seat_id} released by {user_id}')
                await self.seat_event_broadcaster.broadcast_seat_update(
                    event=SeatUpdateEvent(seat_id=seat_id, status=SeatStatus.AVAILABLE)
                )
                return SeatCommandResult(seat_id=seat_id, message='Seat released successfully')

            # Not released: work out why
            if await self.seat_lock_store.read(seat_id=seat_id) is not None:
                raise SeatNotOwnedError()

            if await self.order_ledger_repo.find_by_seat_id(seat_id=seat_id):
                raise SeatNotOwnedError('Seat is already sold')

            Logger.base.info(f'🔓 [RELEASE] {seat_id} was not held, nothing to do')
            return SeatCommandResult.noop(
                seat_id=seat_id, message='Seat was not held; nothing to release'
            )
