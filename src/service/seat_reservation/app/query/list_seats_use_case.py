from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.seat_reservation.app.interface.i_order_ledger_repo import IOrderLedgerRepo
from src.service.seat_reservation.app.interface.i_seat_lock_store import ISeatLockStore
from src.service.seat_reservation.domain.entity.order_entity import OrderEntity
from src.service.seat_reservation.domain.entity.seat_snapshot import SeatSnapshot
from src.service.seat_reservation.domain.enum.seat_status import SeatStatus
from src.service.seat_reservation.domain.seat_reservation_exceptions import (
    OrderLedgerUnavailableError,
)
from src.service.seat_reservation.domain.value_object.seat_id import SeatId


def _seat_sort_key(snapshot: SeatSnapshot) -> tuple[int, int, int, str]:
    if SeatId.is_valid(snapshot.seat_id):
        seat = SeatId.parse(snapshot.seat_id)
        return (0, seat.row, seat.col, snapshot.seat_id)
    return (1, 0, 0, snapshot.seat_id)


class ListSeatsUseCase:
    """
    Merge live holds and committed orders into one snapshot per non-available seat.

    Holds come from the lock store, sales from the ledger; a sale always wins.
    Seats with neither are AVAILABLE and omitted.
    """

    def __init__(
        self, *, seat_lock_store: ISeatLockStore, order_ledger_repo: IOrderLedgerRepo
    ) -> None:
        self.seat_lock_store = seat_lock_store
        self.order_ledger_repo = order_ledger_repo
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        seat_lock_store: ISeatLockStore = Depends(Provide[Container.seat_lock_store]),
        order_ledger_repo: IOrderLedgerRepo = Depends(Provide[Container.order_ledger_repo]),
    ) -> Self:
        return cls(seat_lock_store=seat_lock_store, order_ledger_repo=order_ledger_repo)

    @Logger.io(truncate_content=True)
    async def list_seats(self) -> list[SeatSnapshot]:
        with self.tracer.start_as_current_span('use_case.list_seats') as span:
            # Lock store failure propagates: without it we cannot tell HELD from AVAILABLE
            locks = await self.seat_lock_store.list_by_prefix(prefix='')
            snapshots: dict[str, SeatSnapshot] = {
                seat_id: SeatSnapshot(seat_id=seat_id, status=SeatStatus.HELD, owner_id=holder)
                for seat_id, holder in locks
            }

            orders: list[OrderEntity]
            try:
                orders = await self.order_ledger_repo.list_all()
            except OrderLedgerUnavailableError as e:
                Logger.base.warning(f'⚠️ [SEATS] Ledger unavailable, serving holds only: {e}')
                span.set_attribute('ledger.degraded', True)
                orders = []

            for order in orders:
                snapshots[order.seat_id] = SeatSnapshot(
                    seat_id=order.seat_id, status=SeatStatus.SOLD, owner_id=order.user_id
                )

            span.set_attribute('seat.count', len(snapshots))
            return sorted(snapshots.values(), key=_seat_sort_key)
