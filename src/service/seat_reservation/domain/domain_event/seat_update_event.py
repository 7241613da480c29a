from datetime import datetime, timezone

import attrs
import orjson

from src.service.seat_reservation.domain.enum.seat_status import SeatStatus


SEAT_UPDATE_MESSAGE_TYPE = 'SEAT_UPDATE'


@attrs.define(frozen=True)
class SeatUpdateEvent:
    """Emitted once per successful hold, release or purchase."""

    seat_id: str
    status: SeatStatus
    owner_id: str = ''
    occurred_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))

    def to_message(self) -> bytes:
        return orjson.dumps(
            {
                'type': SEAT_UPDATE_MESSAGE_TYPE,
                'payload': {
                    'seatId': self.seat_id,
                    'status': self.status.value,
                    'ownerId': self.owner_id,
                },
            }
        )
