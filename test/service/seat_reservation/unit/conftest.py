from unittest.mock import AsyncMock

import orjson
import pytest

from src.service.seat_reservation.domain.value_object.venue_layout import VenueLayout
from src.service.seat_reservation.driven_adapter.state.in_memory_seat_lock_store_impl import (
    InMemorySeatLockStoreImpl,
)


@pytest.fixture
def lock_store() -> InMemorySeatLockStoreImpl:
    return InMemorySeatLockStoreImpl()


@pytest.fixture
def order_ledger_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.find_by_seat_id = AsyncMock(return_value=None)
    repo.append = AsyncMock(return_value=1)
    repo.list_all = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def broadcaster() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def venue_layout() -> VenueLayout:
    return VenueLayout.from_json(
        orjson.dumps(
            {
                'venue_name': 'Hall',
                'venue_location': 'City',
                'dimensions': {'rows': 10, 'cols': 10},
                'sections': [
                    {
                        'id': 'A',
                        'name': 'Front',
                        'price': 250,
                        'row_start': 1,
                        'row_end': 3,
                        'col_start': 0,
                        'col_end': 9,
                    }
                ],
            }
        )
    )
