"""
Order Ledger Repository Interface

Append-only record of sold seats.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.service.seat_reservation.domain.entity.order_entity import OrderEntity


class IOrderLedgerRepo(ABC):
    @abstractmethod
    async def append(self, *, seat_id: str, user_id: str, amount: int) -> int:
        """
        Insert and commit one order.

        Returns:
            The new order id

        Raises:
            OrderCommitError: duplicate seat or any write failure
        """
        pass

    @abstractmethod
    async def list_all(self) -> list[OrderEntity]:
        """All orders, unordered. Raises OrderLedgerUnavailableError on read failure."""
        pass

    @abstractmethod
    async def find_by_seat_id(self, *, seat_id: str) -> Optional[OrderEntity]:
        pass
