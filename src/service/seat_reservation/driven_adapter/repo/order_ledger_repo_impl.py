from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.seat_reservation.app.interface.i_order_ledger_repo import IOrderLedgerRepo
from src.service.seat_reservation.domain.entity.order_entity import OrderEntity
from src.service.seat_reservation.domain.seat_reservation_exceptions import (
    OrderCommitError,
    OrderLedgerUnavailableError,
)
from src.service.seat_reservation.driven_adapter.model.order_model import OrderModel


class OrderLedgerRepoImpl(IOrderLedgerRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def append(self, *, seat_id: str, user_id: str, amount: int) -> int:
        try:
            async with self.session_factory() as session:
                order_model = OrderModel(seat_id=seat_id, user_id=user_id, amount=amount)
                session.add(order_model)
                await session.commit()
                return order_model.id
        except IntegrityError as e:
            raise OrderCommitError(f'Seat {seat_id} already has an order') from e
        except SQLAlchemyError as e:
            raise OrderCommitError(f'Failed to record order: {e}') from e

    @Logger.io(truncate_content=True)
    async def list_all(self) -> list[OrderEntity]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(select(OrderModel))
                return [self._model_to_entity(model) for model in result.scalars().all()]
        except SQLAlchemyError as e:
            raise OrderLedgerUnavailableError(f'Order ledger unavailable: {e}') from e

    @Logger.io
    async def find_by_seat_id(self, *, seat_id: str) -> Optional[OrderEntity]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(OrderModel).where(OrderModel.seat_id == seat_id)
                )
                model = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise OrderLedgerUnavailableError(f'Order ledger unavailable: {e}') from e
        return self._model_to_entity(model) if model else None

    def _model_to_entity(self, order_model: OrderModel) -> OrderEntity:
        return OrderEntity(
            id=order_model.id,
            seat_id=order_model.seat_id,
            user_id=order_model.user_id,
            amount=order_model.amount,
            created_at=order_model.created_at,
        )
