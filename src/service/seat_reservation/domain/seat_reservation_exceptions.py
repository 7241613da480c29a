"""Seat reservation errors, mapped to HTTP status through CustomBaseError."""

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
)


class InvalidSeatIdError(DomainError):
    pass


class SeatAlreadyHeldError(ConflictError):
    def __init__(self, message: str = 'Seat is already held by another user') -> None:
        super().__init__(message)


class SeatAlreadySoldError(ConflictError):
    def __init__(self, message: str = 'Seat is already sold') -> None:
        super().__init__(message)


class SeatNotHeldError(ForbiddenError):
    def __init__(self, message: str = 'Seat is not held') -> None:
        super().__init__(message)


class SeatNotOwnedError(ForbiddenError):
    def __init__(self, message: str = 'Seat is held by another user') -> None:
        super().__init__(message)


class LockStoreUnavailableError(InfrastructureError):
    pass


class OrderLedgerUnavailableError(InfrastructureError):
    pass


class OrderCommitError(InfrastructureError):
    pass


class VenueLayoutError(InfrastructureError):
    """Layout file missing or malformed. Raised at startup only."""
