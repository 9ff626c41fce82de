"""Reader layer: converts the text of one value into a Value."""

from __future__ import annotations

import re

from .model import INT64_MAX, INT64_MIN, Value, VBool, VDict, VFloat, VInt, VList, VText
from .scanner import (
    find_closing_quote,
    find_matching,
    find_separator,
    split_top_level,
    unescape,
)


_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_FLOAT_WORDS = frozenset({"inf", "+inf", "-inf", "nan"})
_CALL_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\(")


# ---------------------------------------------------------------------------
# Value extent (multi-line support)
# ---------------------------------------------------------------------------

def is_call(text: str) -> bool:
    """True if *text* starts like a constructor call, e.g. ``Vector2(``."""
    return _CALL_RE.match(text) is not None


def delimited_end(text: str) -> int | None:
    """Locate the end of a delimited value at the start of *text*.

    Returns the index just past the closing ``"``, ``]``, ``}`` or ``)``,
    ``-1`` when the opener is not closed yet, and ``None`` when *text*
    does not open a delimited value at all.
    """
    if text.startswith('"'):
        end = find_closing_quote(text, 1)
    elif text.startswith(("[", "{")):
        end = find_matching(text, 0)
    elif is_call(text):
        end = find_matching(text, text.index("("))
    else:
        return None
    return -1 if end == -1 else end + 1


# ---------------------------------------------------------------------------
# parse_value
# ---------------------------------------------------------------------------

def parse_value(span: str, dropped: list[str] | None = None) -> Value | None:
    """Parse the text of a single value.

    Trial order is significant: ``true`` is a bool, ``"true"`` a string,
    ``12`` an int, ``12.0`` a float.  Constructor calls like
    ``Color(1, 0, 0, 1)`` are kept verbatim as VText.

    Returns ``None`` for a malformed value (unterminated string or
    collection).  Array elements and dictionary entries that cannot be
    parsed are skipped; their source text is appended to *dropped*.
    """
    text = span.strip()

    if text == "true":
        return VBool(True)
    if text == "false":
        return VBool(False)

    if _INT_RE.fullmatch(text):
        number = int(text)
        if INT64_MIN <= number <= INT64_MAX:
            return VInt(number)
    if _FLOAT_RE.fullmatch(text) or text in _FLOAT_WORDS:
        return VFloat(float(text))

    if text.startswith('"'):
        return _parse_string(text)
    if text.startswith("["):
        return _parse_array(text, dropped)
    if text.startswith("{"):
        return _parse_dict(text, dropped)

    # Constructor calls and bare words alike are stored as written.
    return VText(text)


def _parse_string(text: str) -> VText | None:
    end = find_closing_quote(text, 1)
    if end == -1:
        return None
    return VText(unescape(text[1:end]))


def _parse_array(text: str, dropped: list[str] | None) -> VList | None:
    end = find_matching(text, 0)
    if end == -1:
        return None
    items: list[Value] = []
    for piece in split_top_level(text[1:end]):
        if not piece:
            continue
        item = parse_value(piece, dropped)
        if item is None:
            _drop(dropped, piece)
            continue
        items.append(item)
    return VList(items)


def _parse_dict(text: str, dropped: list[str] | None) -> VDict | None:
    end = find_matching(text, 0)
    if end == -1:
        return None
    entries: dict[str, Value] = {}
    for piece in split_top_level(text[1:end]):
        if not piece:
            continue
        entry = _parse_entry(piece, dropped)
        if entry is None:
            _drop(dropped, piece)
            continue
        key, value = entry
        entries[key] = value
    return VDict(entries)


def _parse_entry(piece: str, dropped: list[str] | None) -> tuple[str, Value] | None:
    """Parse ``"key": value`` or ``key = value``."""
    sep = find_separator(piece, ":=")
    if sep == -1:
        return None
    raw_key = piece[:sep].strip()

    if piece[sep] == ":":
        # colon form requires a quoted key
        if not raw_key.startswith('"'):
            return None
        key = unquote(raw_key)
    elif raw_key.startswith('"'):
        key = unquote(raw_key)
    else:
        key = raw_key or None
    if key is None:
        return None

    value = parse_value(piece[sep + 1:], dropped)
    if value is None:
        return None
    return key, value


def unquote(text: str) -> str | None:
    """Unescape a fully quoted string, or ``None`` if *text* is not one."""
    end = find_closing_quote(text, 1)
    if end != len(text) - 1:
        return None
    return unescape(text[1:end])


def _drop(dropped: list[str] | None, piece: str) -> None:
    if dropped is not None:
        dropped.append(piece)
