"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.seat_reservation.app.command import (
    hold_seat_use_case,
    purchase_seat_use_case,
    release_seat_use_case,
)
from src.service.seat_reservation.app.query import list_seats_use_case
from src.service.seat_reservation.driving_adapter.http_controller import (
    seat_reservation_controller,
)


WIRE_MODULES: list[ModuleType] = [
    hold_seat_use_case,
    release_seat_use_case,
    purchase_seat_use_case,
    list_seats_use_case,
    seat_reservation_controller,
]
