import attrs

from src.service.seat_reservation.domain.enum.seat_status import SeatStatus


@attrs.define(frozen=True)
class SeatSnapshot:
    """Merged lock + ledger view of one seat, computed per read."""

    seat_id: str
    status: SeatStatus
    owner_id: str = ''
