"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.state.lua_script_executor import lua_script_executor
from src.platform.state.redis_client import redis_client
from src.service.seat_reservation.driven_adapter.broadcaster.websocket_broadcast_hub import (
    WebSocketBroadcastHub,
)
from src.service.seat_reservation.driven_adapter.repo.order_ledger_repo_impl import (
    OrderLedgerRepoImpl,
)
from src.service.seat_reservation.driven_adapter.state.in_memory_seat_lock_store_impl import (
    InMemorySeatLockStoreImpl,
)
from src.service.seat_reservation.driven_adapter.state.redis_seat_lock_store_impl import (
    RedisSeatLockStoreImpl,
)
from src.service.seat_reservation.driven_adapter.venue.venue_layout_loader import (
    load_venue_layout,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (order ledger)
    database = providers.Singleton(Database, url=config_service.provided.DATABASE_URL_ASYNC)

    # Seat lock store, chosen by SEAT_LOCK_BACKEND
    # redis: shared by every process; memory: single-process dev and tests
    seat_lock_store = providers.Selector(
        config_service.provided.SEAT_LOCK_BACKEND,
        redis=providers.Singleton(
            RedisSeatLockStoreImpl,
            client=providers.Factory(redis_client.get_client),
            lua_scripts=providers.Object(lua_script_executor),
            scan_count=config_service.provided.SEAT_LOCK_SCAN_COUNT,
        ),
        memory=providers.Singleton(InMemorySeatLockStoreImpl),
    )

    # Repositories (stateless - use session_factory per call)
    order_ledger_repo = providers.Singleton(
        OrderLedgerRepoImpl, session_factory=database.provided.session
    )

    # Static venue layout, loaded once at startup (fatal if missing)
    venue_layout = providers.Singleton(
        load_venue_layout, path=config_service.provided.VENUE_LAYOUT_PATH
    )

    # Live observer fan-out (worker started by main.py lifespan)
    broadcast_hub = providers.Singleton(
        WebSocketBroadcastHub, send_timeout=config_service.provided.WS_SEND_TIMEOUT_SECONDS
    )


container = Container()
