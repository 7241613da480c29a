"""
Seat Id Value Object

`r<row>-c<col>`: the join key across lock store, order ledger and broadcasts.
"""

import re

import attrs

from src.service.seat_reservation.domain.seat_reservation_exceptions import InvalidSeatIdError


_SEAT_ID_PATTERN = re.compile(r'^r(\d+)-c(\d+)$')


@attrs.define(frozen=True)
class SeatId:
    row: int
    col: int

    @classmethod
    def parse(cls, seat_id: str) -> 'SeatId':
        match = _SEAT_ID_PATTERN.fullmatch(seat_id or '')
        if not match:
            raise InvalidSeatIdError(f'Invalid seat ID format: {seat_id!r}. Expected: r<row>-c<col>')
        return cls(row=int(match.group(1)), col=int(match.group(2)))

    @classmethod
    def is_valid(cls, seat_id: str) -> bool:
        return bool(_SEAT_ID_PATTERN.fullmatch(seat_id or ''))
