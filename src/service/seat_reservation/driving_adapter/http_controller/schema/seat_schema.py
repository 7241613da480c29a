from pydantic import BaseModel, ConfigDict, Field

from src.service.seat_reservation.domain.enum.seat_status import SeatStatus


class SeatCommandRequest(BaseModel):
    """Body of hold, release and purchase"""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={'example': {'seatId': 'r3-c7', 'userId': 'alice'}},
    )

    seat_id: str = Field(alias='seatId', min_length=1)
    user_id: str = Field(alias='userId', min_length=1)


class SeatCommandResponse(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            'example': {'status': 'success', 'message': 'Seat held successfully', 'seatId': 'r3-c7'}
        },
    )

    status: str = 'success'
    message: str
    seat_id: str = Field(alias='seatId')


class SeatStateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    seat_id: str = Field(alias='seatId')
    status: SeatStatus
    owner_id: str = Field(alias='ownerId', default='')
