"""Type-checked accessors over decoded JSON objects.

Each accessor returns ``None`` when the key is absent or holds a value of the
wrong JSON type; callers substitute the zero value. Mismatches are logged at
DEBUG level only.
"""
import logging
import math
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_MISSING = object()


def _mismatch(key: str, expected: str, value: Any) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("field %r: expected %s, got %s", key, expected, type(value).__name__)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but JSON true/false are not numbers
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def get_object(obj: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        return None
    if not isinstance(value, dict):
        _mismatch(key, "object", value)
        return None
    return value


def get_array(obj: Dict[str, Any], key: str) -> Optional[List[Any]]:
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        return None
    if not isinstance(value, list):
        _mismatch(key, "array", value)
        return None
    return value


def get_str(obj: Dict[str, Any], key: str) -> Optional[str]:
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        return None
    if not isinstance(value, str):
        _mismatch(key, "string", value)
        return None
    return value


def get_float(obj: Dict[str, Any], key: str) -> Optional[float]:
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        return None
    if not _is_number(value):
        _mismatch(key, "number", value)
        return None
    return float(value)


def get_int64(obj: Dict[str, Any], key: str) -> Optional[int]:
    """Return a JSON number truncated toward zero, or None outside int64."""
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        return None
    if not _is_number(value):
        _mismatch(key, "number", value)
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            _mismatch(key, "finite number", value)
            return None
        value = math.trunc(value)
    if not INT64_MIN <= value <= INT64_MAX:
        _mismatch(key, "int64", value)
        return None
    return value
