"""
Venue Layout Value Object

Static venue description loaded once at startup. Only sections matter to the
engine (price lookup); the raw bytes are kept so the layout can be served
verbatim.
"""

from typing import Any

import attrs
import orjson

from src.service.seat_reservation.domain.seat_reservation_exceptions import VenueLayoutError
from src.service.seat_reservation.domain.value_object.seat_id import SeatId


@attrs.define(frozen=True)
class Section:
    id: str
    price: float
    row_start: int
    row_end: int
    col_start: int
    col_end: int

    def contains(self, seat: SeatId) -> bool:
        """Inclusive on both ends of both ranges"""
        return (
            self.row_start <= seat.row <= self.row_end
            and self.col_start <= seat.col <= self.col_end
        )


@attrs.define(frozen=True)
class VenueLayout:
    venue_name: str
    sections: tuple[Section, ...]
    raw: bytes = attrs.field(default=b'', repr=False, eq=False)

    def resolve_price(self, seat: SeatId, *, default_price: int) -> int:
        """
        First section containing the seat wins; its price is truncated to int.
        Seats outside every section, or in a section whose price truncates to
        zero, cost `default_price`.
        """
        for section in self.sections:
            if section.contains(seat):
                return int(section.price) or default_price
        return default_price

    @classmethod
    def from_json(cls, raw: bytes) -> 'VenueLayout':
        try:
            data: Any = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise VenueLayoutError(f'Venue layout is not valid JSON: {e}') from e

        if not isinstance(data, dict) or not isinstance(data.get('sections'), list):
            raise VenueLayoutError('Venue layout must be an object with a "sections" list')

        try:
            sections = tuple(
                Section(
                    id=str(s['id']),
                    price=float(s['price']),
                    row_start=int(s['row_start']),
                    row_end=int(s['row_end']),
                    col_start=int(s['col_start']),
                    col_end=int(s['col_end']),
                )
                for s in data['sections']
            )
            return cls(
                venue_name=str(data.get('venue_name', '')),
                sections=sections,
                raw=raw,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise VenueLayoutError(f'Venue layout is malformed: {e}') from e
