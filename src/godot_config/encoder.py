"""Encoder: Store -> canonical config text."""

from __future__ import annotations

from .model import (
    DEFAULT_SECTION,
    Store,
    Value,
    VBool,
    VDict,
    VFloat,
    VInt,
    VList,
    VText,
    check_section_name,
)
from .reader import parse_value
from .scanner import escape


_KEY_QUOTE_CHARS = frozenset(' \n\r\t="\\')
_TEXT_QUOTE_CHARS = frozenset(' \n\r\t"')
# Characters that would change how a bare word is split or cut on re-read.
_TEXT_STRUCTURAL = frozenset(',;#[]{}()')


def encode(store: Store) -> str:
    """Serialize *store*; the default section is written first, headerless.

    Raises ValueError for a section name a header line cannot represent.
    """
    out: list[str] = []
    ordered = sorted(store.items(), key=lambda item: item[0] != DEFAULT_SECTION)
    for name, entries in ordered:
        if out:
            out.append("")
        if name != DEFAULT_SECTION:
            check_section_name(name)
            out.append(f"[{name}]")
            out.append("")
        for key, value in entries.items():
            out.append(f"{format_key(key)}={format_value(value)}")
    return "".join(line + "\n" for line in out)


# ---------------------------------------------------------------------------
# Keys and values
# ---------------------------------------------------------------------------

def quote(text: str) -> str:
    return f'"{escape(text)}"'


def format_key(key: str) -> str:
    if _KEY_QUOTE_CHARS.intersection(key):
        return quote(key)
    # a bare key is stripped on re-read and must not look like a header or a comment
    if not key or key != key.strip() or key.startswith(("[", ";", "#", "//")):
        return quote(key)
    return key


def format_value(value: Value) -> str:
    if isinstance(value, VText):
        return quote(value.value) if _needs_quotes(value.value) else value.value
    if isinstance(value, VList):
        if not value.items:
            return "[]"
        return "[" + ", ".join(format_value(v) for v in value.items) + "]"
    if isinstance(value, VDict):
        if not value.entries:
            return "{}"
        pairs = (f"{quote(k)}: {format_value(v)}" for k, v in value.entries.items())
        return "{ " + ", ".join(pairs) + " }"
    return format_scalar(value)


def format_scalar(value: Value) -> str:
    """Canonical bare text of a scalar (strings are returned unchanged)."""
    if isinstance(value, VBool):
        return "true" if value.value else "false"
    if isinstance(value, VInt):
        return str(value.value)
    if isinstance(value, VFloat):
        # repr always keeps a '.' or an exponent: 3.0, 1e+20, inf, nan
        return repr(value.value)
    if isinstance(value, VText):
        return value.value
    raise TypeError(f"not a scalar: {type(value).__name__}")


def _needs_quotes(text: str) -> bool:
    if not text:
        return True
    if _TEXT_QUOTE_CHARS.intersection(text) or _TEXT_STRUCTURAL.intersection(text):
        return True
    if "//" in text:
        return True
    # bare "true", "12", "1.5" would come back as another type
    return parse_value(text) != VText(text)
