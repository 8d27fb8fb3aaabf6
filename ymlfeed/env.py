"""Reading typed settings from environment variables."""

import os
import re

_INTEGER = re.compile(r"[+-]?[0-9]+")


def get_env_string(key: str, default: str) -> str:
    """Return the variable's value, or ``default`` when it is unset or empty."""
    return os.environ.get(key) or default


def get_env_int(key: str, default: int) -> int:
    """Return the variable as an integer, or ``default`` when unset, empty or malformed."""
    value = os.environ.get(key, "")
    if _INTEGER.fullmatch(value) and -(2**63) <= int(value) < 2**63:
        return int(value)
    return default