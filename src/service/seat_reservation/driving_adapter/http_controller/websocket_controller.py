from fastapi import APIRouter, WebSocket, status
from fastapi.responses import PlainTextResponse

from src.platform.config.di import container
from src.platform.logging.loguru_io import Logger
from src.service.seat_reservation.driven_adapter.broadcaster.websocket_broadcast_hub import (
    CONNECTED_GREETING,
)


router = APIRouter()


@router.websocket('/ws')
async def seat_updates(websocket: WebSocket) -> None:
    """
    Live SEAT_UPDATE feed.

    Client frames are read only to notice the disconnect; their content is ignored.
    """
    hub = container.broadcast_hub()
    await websocket.accept()
    await hub.register(websocket, greeting=CONNECTED_GREETING)
    Logger.base.info(f'🔌 [WS] Observer connected from {websocket.client}')
    try:
        while True:
            message = await websocket.receive()
            if message['type'] == 'websocket.disconnect':
                break
    finally:
        await hub.unregister(websocket)
        Logger.base.info(f'🔌 [WS] Observer disconnected from {websocket.client}')


@router.get('/ws')
async def seat_updates_requires_upgrade() -> PlainTextResponse:
    return PlainTextResponse('Upgrade Required', status_code=status.HTTP_426_UPGRADE_REQUIRED)
