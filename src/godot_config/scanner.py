"""Scanner primitives: quote/escape aware delimiter search and splitting.

All searches share the same rules:

- a ``"`` toggles the quote state unless it is escaped;
- a character is escaped when it is preceded by an odd number of
  consecutive backslashes;
- bracket depth counts ``[]``, ``{}`` and ``()`` together, outside quotes.

Functions return ``-1`` when nothing is found, like ``str.find``.
"""

from __future__ import annotations

import re
from enum import Enum


# ---------------------------------------------------------------------------
# Comment styles
# ---------------------------------------------------------------------------

class CommentStyle(Enum):
    """Comment marker set used by a parse.  The two sets are never mixed."""

    GODOT = (";",)
    SIMPLE = ("#", "//")

    @property
    def markers(self) -> tuple[str, ...]:
        return self.value


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}
_ESCAPE_RE = re.compile(r'\\([\\"nrt])')

_OPENERS = "([{"
_CLOSERS = ")]}"


def escape(text: str) -> str:
    """Escape backslash, double quote, newline, carriage return and tab."""
    return "".join(_ESCAPES.get(c, c) for c in text)


def unescape(text: str) -> str:
    """Reverse :func:`escape` in a single pass.

    ``\\\\n`` becomes a backslash followed by ``n``, never a newline.
    Unknown escapes such as ``\\x`` are kept verbatim.
    """
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES[m.group(1)], text)


def is_escaped(text: str, index: int) -> bool:
    """True if ``text[index]`` is preceded by an odd run of backslashes."""
    escaped = False
    i = index - 1
    while i >= 0 and text[i] == "\\":
        escaped = not escaped
        i -= 1
    return escaped


# ---------------------------------------------------------------------------
# Delimiter search
# ---------------------------------------------------------------------------

def find_closing_quote(text: str, start: int) -> int:
    """Index of the first unescaped ``"`` at or after *start*."""
    i = text.find('"', start)
    while i != -1:
        if not is_escaped(text, i):
            return i
        i = text.find('"', i + 1)
    return -1


def find_unescaped(text: str, target: str, start: int = 0) -> int:
    """Index of the first unescaped *target* outside quotes."""
    if target == '"':
        return find_closing_quote(text, start)
    in_quotes = False
    for i in range(start, len(text)):
        c = text[i]
        if c == '"':
            if not is_escaped(text, i):
                in_quotes = not in_quotes
        elif c == target and not in_quotes and not is_escaped(text, i):
            return i
    return -1


def find_matching(text: str, start: int) -> int:
    """Index of the bracket closing the one at ``text[start]``."""
    depth = 0
    in_quotes = False
    for i in range(start, len(text)):
        c = text[i]
        if c == '"':
            if not is_escaped(text, i):
                in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif c in _OPENERS:
            depth += 1
        elif c in _CLOSERS:
            depth -= 1
            if depth == 0:
                return i
    return -1


def find_separator(text: str, separators: str) -> int:
    """Index of the first top-level character found in *separators*."""
    depth = 0
    in_quotes = False
    for i, c in enumerate(text):
        if c == '"':
            if not is_escaped(text, i):
                in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif c in _OPENERS:
            depth += 1
        elif c in _CLOSERS:
            depth -= 1
        elif c in separators and depth == 0:
            return i
    return -1


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split *text* on *sep* at depth 0 outside quotes; pieces are stripped."""
    pieces: list[str] = []
    depth = 0
    in_quotes = False
    begin = 0
    for i, c in enumerate(text):
        if c == '"':
            if not is_escaped(text, i):
                in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif c in _OPENERS:
            depth += 1
        elif c in _CLOSERS:
            depth -= 1
        elif c == sep and depth == 0:
            pieces.append(text[begin:i].strip())
            begin = i + 1
    pieces.append(text[begin:].strip())
    return pieces


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

def is_comment_line(line: str, style: CommentStyle) -> bool:
    return line.lstrip().startswith(style.markers)


def strip_comment(text: str, style: CommentStyle) -> str:
    """Cut *text* at the first comment marker outside quotes and brackets.

    When a bracket is left open at the end, depth is ignored and the first
    marker outside quotes wins.
    """
    depth = 0
    in_quotes = False
    first_marker = -1
    for i, c in enumerate(text):
        if c == '"':
            if not is_escaped(text, i):
                in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif c in _OPENERS:
            depth += 1
        elif c in _CLOSERS:
            depth -= 1
        elif text.startswith(style.markers, i):
            if depth <= 0:
                return text[:i]
            if first_marker == -1:
                first_marker = i
    if depth > 0 and first_marker != -1:
        return text[:first_marker]
    return text
