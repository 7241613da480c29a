"""
Seat Command DTOs

Result DTO shared by hold, release and purchase.
"""

import attrs


@attrs.define
class SeatCommandResult:
    seat_id: str
    message: str
    changed: bool = True  # False when the command was an idempotent no-op

    @classmethod
    def noop(cls, *, seat_id: str, message: str) -> 'SeatCommandResult':
        return cls(seat_id=seat_id, message=message, changed=False)
