from pathlib import Path

from src.platform.logging.loguru_io import Logger
from src.service.seat_reservation.domain.seat_reservation_exceptions import VenueLayoutError
from src.service.seat_reservation.domain.value_object.venue_layout import VenueLayout


def load_venue_layout(*, path: str | Path) -> VenueLayout:
    """Read and parse the layout file. Any failure is fatal for startup."""
    layout_path = Path(path)
    try:
        raw = layout_path.read_bytes()
    except OSError as e:
        raise VenueLayoutError(f'Failed to load venue layout from {layout_path}: {e}') from e

    layout = VenueLayout.from_json(raw)
    Logger.base.info(
        f'🏟️ [VENUE] Loaded "{layout.venue_name}" with {len(layout.sections)} sections'
    )
    return layout
