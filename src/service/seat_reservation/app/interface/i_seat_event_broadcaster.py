from abc import ABC, abstractmethod

from src.service.seat_reservation.domain.domain_event.seat_update_event import SeatUpdateEvent


class ISeatEventBroadcaster(ABC):
    """Fan-out of seat transitions to live observers. Never blocks the caller on delivery."""

    @abstractmethod
    async def broadcast_seat_update(self, *, event: SeatUpdateEvent) -> None:
        pass
