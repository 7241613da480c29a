from pathlib import Path
from typing import Annotated, List, Literal

import orjson
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Seat Reservation Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    LOG_TO_FILE: bool = False

    # CORS: comma list (a,b) or JSON list (["a","b"]); NoDecode hands the raw env string over
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ['*']

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, str):
            return [str(i) for i in orjson.loads(v)]
        elif isinstance(v, list):
            return v
        return []

    # Redis (seat lock store)
    REDIS_HOST: str = 'localhost'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ''
    REDIS_DECODE_RESPONSES: bool = True

    # Redis Connection Pool Configuration
    REDIS_POOL_MAX_CONNECTIONS: int = 100
    REDIS_POOL_SOCKET_TIMEOUT: int = 5  # Socket read/write timeout (seconds)
    REDIS_POOL_SOCKET_CONNECT_TIMEOUT: int = 5
    REDIS_POOL_SOCKET_KEEPALIVE: bool = True
    REDIS_POOL_HEALTH_CHECK_INTERVAL: int = 30

    # Seat lock
    SEAT_LOCK_BACKEND: Literal['redis', 'memory'] = 'redis'
    SEAT_LOCK_KEY_PREFIX: str = ''  # Isolates keys of parallel test runs
    SEAT_HOLD_TTL_SECONDS: int = 60
    SEAT_LOCK_SCAN_COUNT: int = 500

    # Venue / pricing
    VENUE_LAYOUT_PATH: str = str(_PROJECT_ROOT / 'venue_layout.json')
    DEFAULT_SEAT_PRICE: int = 100

    # WebSocket fan-out
    WS_SEND_TIMEOUT_SECONDS: float = 5.0

    # PostgreSQL (order ledger)
    POSTGRES_USER: str = 'user'
    POSTGRES_PASSWORD: str = 'password'
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = 'seat_reservation'
    DATABASE_URL: str = ''  # Full async URL override, e.g. sqlite+aiosqlite:///./orders.db

    # Database Connection Pool Configuration
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    @property
    def REDIS_URL(self) -> str:
        return f'redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}'


settings = Settings()  # type: ignore
