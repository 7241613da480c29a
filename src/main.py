"""
Production FastAPI Application

Seat hold/release/purchase API plus the live WebSocket seat feed.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.platform.state.lua_script_executor import lua_script_executor
from src.platform.state.redis_client import redis_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Seat Service] Starting up...')
    settings = container.config_service()

    tracing = TracingConfig(service_name='seat-reservation-service')
    tracing.setup()
    Logger.base.info('📊 [Seat Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Seat Service] Dependency injection wired')

    # Fail fast on a missing or malformed layout
    venue_layout = container.venue_layout()
    Logger.base.info(
        f'🏟️  [Seat Service] Venue "{venue_layout.venue_name}" ready, sections: '
        f'{", ".join(s.id for s in venue_layout.sections)}'
    )

    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)
    await database.create_tables()
    Logger.base.info('🗄️  [Seat Service] Order ledger ready + instrumented')

    if settings.SEAT_LOCK_BACKEND == 'redis':
        tracing.instrument_redis()
        client = await redis_client.initialize()
        await lua_script_executor.initialize(client=client)
        Logger.base.info('📡 [Seat Service] Redis lock store ready')
    else:
        Logger.base.warning('⚠️ [Seat Service] In-memory lock store: single process only')

    hub = container.broadcast_hub()

    async with anyio.create_task_group() as tg:
        await hub.start(task_group=tg)
        Logger.base.info('✅ [Seat Service] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Seat Service] Shutting down...')
        await hub.stop()

    if settings.SEAT_LOCK_BACKEND == 'redis':
        await redis_client.disconnect()
        Logger.base.info('📡 [Seat Service] Redis disconnected')

    await database.dispose()
    Logger.base.info('🗄️  [Seat Service] Database engine disposed')

    tracing.shutdown()

    # Fresh hub / stores on the next startup (tests start the app repeatedly)
    container.reset_singletons()
    container.unwire()

    Logger.base.info('👋 [Seat Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/', include_in_schema=False)
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
