"""
Key String Generator

Helper functions for the Redis keys of seat locks.
"""

import os
import re

from src.platform.config.core_setting import settings


_LOCK_KEY_HEAD = 'seat:'
_LOCK_KEY_TAIL = ':lock'
_GLOB_SPECIAL = re.compile(r'([\\*?\[\]])')


def _get_key_prefix() -> str:
    """Read at call time: pytest sets SEAT_LOCK_KEY_PREFIX after modules are imported"""
    return os.getenv('SEAT_LOCK_KEY_PREFIX', settings.SEAT_LOCK_KEY_PREFIX)


def _make_key(key: str) -> str:
    """Add prefix to key for test isolation in parallel testing"""
    return f'{_get_key_prefix()}{key}'


def escape_glob(text: str) -> str:
    return _GLOB_SPECIAL.sub(r'\\\1', text)


def make_seat_lock_key(*, seat_id: str) -> str:
    return _make_key(f'{_LOCK_KEY_HEAD}{seat_id}{_LOCK_KEY_TAIL}')


def make_seat_lock_match_pattern(*, seat_id_prefix: str = '') -> str:
    """SCAN MATCH pattern for every lock whose seat id starts with `seat_id_prefix`"""
    return f'{escape_glob(_get_key_prefix())}{_LOCK_KEY_HEAD}{escape_glob(seat_id_prefix)}*{_LOCK_KEY_TAIL}'


def parse_seat_id_from_lock_key(key: str) -> str | None:
    head = _make_key(_LOCK_KEY_HEAD)
    if not key.startswith(head) or not key.endswith(_LOCK_KEY_TAIL):
        return None
    seat_id = key[len(head) : -len(_LOCK_KEY_TAIL)]
    return seat_id or None
