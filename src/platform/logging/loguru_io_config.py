from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Use test log directory if in test environment
LOG_DIR = os.environ.get('TEST_LOG_DIR', str(LOG_DIR))

SENSITIVE_KEYWORDS = {
    'password',
    'secret',
    'token',
}

MAX_LOGGED_CONTENT_LENGTH = 500

call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CALL_TARGET = 'call_target'
    CALL_DEPTH = 'call_depth'


_DEFAULT_EXTRA = {
    ExtraField.SERVICE_CONTEXT: get_service_context(),
    ExtraField.CALL_TARGET: '',
    ExtraField.CALL_DEPTH: '',
}


class InterceptHandler(logging.Handler):
    """Route stdlib logging (uvicorn, sqlalchemy, redis) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # asyncio selector chatter is never useful
        if record.levelno <= logging.DEBUG and record.name == 'asyncio':
            return

        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        loguru_logger.bind(**_DEFAULT_EXTRA).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


io_log_format = ' | '.join(
    (
        '<g>{time:YYYY-MM-DD HH:mm:ss.SSS}</>',
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        f'{{extra[{ExtraField.CALL_DEPTH}]}}{{message}}',
    )
)


def _configure() -> 'LoguruLogger':
    loguru_logger.remove()  # Drop the default handler, we install our own format
    bound = loguru_logger.bind(**_DEFAULT_EXTRA)

    min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'
    bound.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

    if settings.LOG_TO_FILE or os.environ.get('TEST_LOG_DIR'):
        now = datetime.now(timezone.utc)
        prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
        bound.add(
            f'{LOG_DIR}/{prefix}{now.strftime("%Y-%m-%d_%H")}.log',
            format=io_log_format,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
            level=min_log_level,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    return bound


custom_logger = _configure()
