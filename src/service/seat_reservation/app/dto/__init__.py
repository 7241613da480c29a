from src.service.seat_reservation.app.dto.seat_command_dto import SeatCommandResult


__all__ = ['SeatCommandResult']
