from datetime import datetime
from typing import Optional

import attrs


@attrs.define
class OrderEntity:
    """A committed sale of one seat. Never updated or deleted once written."""

    seat_id: str
    user_id: str
    amount: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None
