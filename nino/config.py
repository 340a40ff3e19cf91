from __future__ import annotations
import logging
import os
from typing import Optional


_TRUTHY = {"1", "true", "yes", "on"}


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def int_from_env(var: str) -> Optional[int]:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


def get_recursion_limit() -> Optional[int]:
    # None leaves the interpreter's own limit untouched
    return int_from_env('NINO_RECURSION_LIMIT')


def get_strict_types() -> bool:
    return flag_from_env('NINO_STRICT_TYPES')


def get_log_level() -> int:
    raw = os.environ.get('NINO_LOG_LEVEL', 'WARNING').strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.WARNING


def use_color() -> bool:
    return 'NO_COLOR' not in os.environ
