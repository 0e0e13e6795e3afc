"""
Lenient coercion of loosely-typed backend values.

Every helper here is total: values that fail coercion fall back to the
supplied default instead of raising.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "1", "yes", "t"}


def to_optional_float(value: Any) -> Optional[float]:
    """Return *value* as a finite float, or ``None`` if absent / not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Could not coerce %r to a number", value)
        return None
    if not math.isfinite(number):
        return None
    return number


def to_float(value: Any, default: float = 0.0) -> float:
    number = to_optional_float(value)
    return default if number is None else number


def to_optional_int(value: Any) -> Optional[int]:
    """Truncate numeric values toward zero; ``None`` when not numeric."""
    number = to_optional_float(value)
    if number is None:
        return None
    return int(number)


def to_int(value: Any, default: int = 0) -> int:
    number = to_optional_int(value)
    return default if number is None else number


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def to_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positives."""
    return math.floor(value + 0.5)


def percentage(completed: int, total: int) -> int:
    """
    Integer completion percentage in ``[0, 100]``.

    A zero or negative *total* yields 0 without dividing.  The result only
    reaches 100 when ``completed >= total``, so rounding never reports a
    finished series while work remains.
    """
    if total <= 0:
        return 0
    pct = round_half_up(completed / total * 100)
    if completed < total:
        pct = min(pct, 99)
    return max(0, min(100, pct))
