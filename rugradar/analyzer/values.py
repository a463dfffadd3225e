from typing import Any, Optional

# Upstream APIs send numbers as strings, nulls, or not at all.
# These map them onto the neutral defaults once, at the probe boundary.


def safe_float(val: Any, default: float = 0.0) -> float:
    if isinstance(val, (dict, list, bool, type(None))):
        return default
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def safe_int(val: Any, default: int = 0) -> int:
    if isinstance(val, (dict, list, bool, type(None))):
        return default
    try:
        return int(float(val))
    except (TypeError, ValueError):
        return default


def to_bool(val: Any) -> bool:
    """GoPlus flags: "1" / 1 / True are set, anything else is not."""
    return val is True or val == 1 or val == "1"


def to_percent(val: Any) -> Optional[float]:
    """Fraction ("0.05") to percent (5.0); missing or garbage gives None."""
    if val is None or val == "" or isinstance(val, bool):
        return None
    try:
        return float(val) * 100
    except (TypeError, ValueError):
        return None
