from inspect import getfile, getsourcelines
from os.path import basename
import re
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    MAX_LOGGED_CONTENT_LENGTH,
    SENSITIVE_KEYWORDS,
    call_depth_var,
)


_SENSITIVE_PATTERN = re.compile(
    r"(\b(?:%s)\w*)(\s*[=:]\s*)'?[^',\s)}]+'?" % '|'.join(SENSITIVE_KEYWORDS), re.IGNORECASE
)

DEPTH_LINE = '│ '


def fetch_layer_depth() -> str:
    return DEPTH_LINE * max(call_depth_var.get() - 1, 0)


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    try:
        lineno = getsourcelines(func)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(getattr(func, "__func__", func)))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    call_depth_var.set(max(call_depth_var.get() - 1, 0))


def mask_sensitive(data: Any) -> Any:
    data_str = str(data)
    masked = _SENSITIVE_PATTERN.sub(r"\1\2'********'", data_str)
    return data if masked == data_str else masked


def should_mask_keyword(keyword: Any, value: Any) -> Any:
    if isinstance(keyword, str) and any(word in keyword.lower() for word in SENSITIVE_KEYWORDS):
        return '********'
    return value


def truncate_content(content: Any) -> Any:
    text = str(content)
    if len(text) <= MAX_LOGGED_CONTENT_LENGTH:
        return content
    return f'{text[:MAX_LOGGED_CONTENT_LENGTH]}... [truncated {len(text) - MAX_LOGGED_CONTENT_LENGTH} chars]'
