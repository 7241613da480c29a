from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.seat_reservation.app.command.hold_seat_use_case import HoldSeatUseCase
from src.service.seat_reservation.app.command.purchase_seat_use_case import PurchaseSeatUseCase
from src.service.seat_reservation.app.command.release_seat_use_case import ReleaseSeatUseCase
from src.service.seat_reservation.app.dto import SeatCommandResult
from src.service.seat_reservation.app.query.list_seats_use_case import ListSeatsUseCase
from src.service.seat_reservation.domain.value_object.venue_layout import VenueLayout
from src.service.seat_reservation.driving_adapter.http_controller.schema.seat_schema import (
    SeatCommandRequest,
    SeatCommandResponse,
    SeatStateResponse,
)


router = APIRouter()


def _to_response(result: SeatCommandResult) -> SeatCommandResponse:
    return SeatCommandResponse(message=result.message, seat_id=result.seat_id)


@router.get('/venue')
@inject
async def get_venue(
    venue_layout: VenueLayout = Depends(Provide[Container.venue_layout]),
) -> Response:
    """Venue layout exactly as loaded from disk."""
    return Response(content=venue_layout.raw, media_type='application/json')


@router.post('/hold')
@Logger.io
async def hold_seat(
    request: SeatCommandRequest,
    use_case: HoldSeatUseCase = Depends(HoldSeatUseCase.depends),
) -> SeatCommandResponse:
    result = await use_case.execute(seat_id=request.seat_id, user_id=request.user_id)
    return _to_response(result)


@router.delete('/hold')
@Logger.io
async def release_seat(
    request: SeatCommandRequest,
    use_case: ReleaseSeatUseCase = Depends(ReleaseSeatUseCase.depends),
) -> SeatCommandResponse:
    result = await use_case.execute(seat_id=request.seat_id, user_id=request.user_id)
    return _to_response(result)


@router.post('/purchase')
@Logger.io
async def purchase_seat(
    request: SeatCommandRequest,
    use_case: PurchaseSeatUseCase = Depends(PurchaseSeatUseCase.depends),
) -> SeatCommandResponse:
    result = await use_case.execute(seat_id=request.seat_id, user_id=request.user_id)
    return _to_response(result)


@router.get('/seats', response_model=list[SeatStateResponse])
@Logger.io(truncate_content=True)
async def list_seats(
    use_case: ListSeatsUseCase = Depends(ListSeatsUseCase.depends),
) -> list[SeatStateResponse]:
    """Every HELD or SOLD seat; seats not listed are AVAILABLE."""
    snapshots = await use_case.list_seats()
    return [
        SeatStateResponse(seat_id=s.seat_id, status=s.status, owner_id=s.owner_id)
        for s in snapshots
    ]
