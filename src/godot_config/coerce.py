"""Type coercion: stored Value -> caller-requested Python shape.

Targets are ordinary type objects and generic aliases::

    coerce(v, int)
    coerce(v, list[float])
    coerce(v, dict[str, list[int]])
    coerce(v, VList)            # variant check, returns the Value itself

Any conversion failure, at any depth, returns *default*.
"""

from __future__ import annotations

import math
import re
import typing
from typing import Any

from .encoder import format_scalar
from .model import VALUE_TYPES, Value, VBool, VDict, VFloat, VInt, VList, VText, to_python


_INT_RE = re.compile(r"\s*[+-]?\d+\s*")
_FLOAT_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*")
_FLOAT_WORDS = frozenset({"inf", "+inf", "-inf", "nan"})


class _CoercionFailed(Exception):
    pass


def coerce(value: Value | None, target: Any = None, default: Any = None) -> Any:
    """Convert *value* to *target*, or return *default* when it cannot."""
    if value is None:
        return default
    try:
        return _convert(value, target)
    except _CoercionFailed:
        return default


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _convert(value: Value, target: Any) -> Any:
    if target is None or target is Value:
        return value
    if target is object or target is Any:
        return to_python(value)
    origin = typing.get_origin(target)
    if origin is not None:
        return _convert_generic(value, origin, typing.get_args(target))

    if isinstance(target, type) and issubclass(target, VALUE_TYPES):
        if isinstance(value, target):
            return value
        raise _CoercionFailed

    if target is list:
        return _convert_list(value, object)
    if target is tuple:
        return tuple(_convert_list(value, object))
    if target is dict:
        return _convert_dict(value, str, object)
    return _convert_scalar(value, target)


def _convert_generic(value: Value, origin: Any, args: tuple[Any, ...]) -> Any:
    if origin is list:
        return _convert_list(value, args[0] if args else object)
    if origin is tuple:
        # only the homogeneous form tuple[T, ...] is supported
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_convert_list(value, args[0]))
        if not args:
            return tuple(_convert_list(value, object))
        raise _CoercionFailed
    if origin is dict:
        key_type, value_type = args if args else (str, object)
        return _convert_dict(value, key_type, value_type)
    raise _CoercionFailed


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

def _convert_list(value: Value, element: Any) -> list:
    if not isinstance(value, VList):
        raise _CoercionFailed
    return [_convert(item, element) for item in value.items]


def _convert_dict(value: Value, key_type: Any, value_type: Any) -> dict:
    if not isinstance(value, VDict):
        raise _CoercionFailed
    return {
        _convert_key(k, key_type): _convert(v, value_type)
        for k, v in value.entries.items()
    }


def _convert_key(key: str, key_type: Any) -> Any:
    if key_type is object or key_type is Any:
        return key
    return _convert_scalar(VText(key), key_type)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def _convert_scalar(value: Value, target: Any) -> Any:
    if isinstance(value, (VList, VDict)):
        raise _CoercionFailed
    if target is str:
        return format_scalar(value)
    if target is bool:
        return _to_bool(value)
    if target is int:
        return _to_int(value)
    if target is float:
        return _to_float(value)
    raise _CoercionFailed


def _to_bool(value: Value) -> bool:
    if isinstance(value, (VBool, VInt, VFloat)):
        return bool(value.value)
    text = value.value.strip().lower()
    if text in ("true", "false"):
        return text == "true"
    raise _CoercionFailed


def _to_int(value: Value) -> int:
    if isinstance(value, (VBool, VInt)):
        return int(value.value)
    if isinstance(value, VFloat):
        if not math.isfinite(value.value):
            raise _CoercionFailed
        return round(value.value)  # half to even
    if _INT_RE.fullmatch(value.value):
        return int(value.value)
    raise _CoercionFailed


def _to_float(value: Value) -> float:
    if isinstance(value, (VBool, VInt, VFloat)):
        return float(value.value)
    text = value.value.strip()
    if _FLOAT_RE.fullmatch(text) or text in _FLOAT_WORDS:
        return float(text)
    raise _CoercionFailed
