from __future__ import annotations
import os

# Total attempts a live block makes before its failure propagates
LIVE_MAX_ATTEMPTS = 3

_TRUTHY = {"1", "true", "yes", "on"}


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def get_type_check_default() -> bool:
    return flag_from_env('RESILIENT_TYPECHECK', False)


def get_log_level() -> str:
    raw = os.environ.get('RESILIENT_LOG_LEVEL')
    return raw.strip().upper() if raw and raw.strip() else 'WARNING'
