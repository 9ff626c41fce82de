"""Line-level parser: text -> Store.

The parse is best-effort.  Lines and entries that cannot be interpreted are
skipped and recorded as :class:`ParseIssue` objects on the
:class:`ParseResult`; ``ParseOptions(strict=True)`` turns any recorded issue
into a :class:`~godot_config.errors.ConfigParseError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .errors import ConfigParseError
from .model import DEFAULT_SECTION, Store
from .reader import delimited_end, is_call, parse_value
from .scanner import (
    CommentStyle,
    find_closing_quote,
    find_unescaped,
    is_comment_line,
    strip_comment,
    unescape,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Options and results
# ---------------------------------------------------------------------------

@dataclass
class ParseOptions:
    comment_style: CommentStyle = CommentStyle.GODOT
    strict: bool = False


class IssueKind(Enum):
    MALFORMED_LINE = "malformed line"
    MALFORMED_SECTION = "malformed section header"
    MALFORMED_VALUE = "malformed value"
    UNTERMINATED_VALUE = "unterminated value"
    DROPPED_ENTRY = "dropped entry"


@dataclass(slots=True)
class ParseIssue:
    line: int  # 1-based line where the statement starts
    kind: IssueKind
    text: str


@dataclass
class ParseResult:
    """Store built by a parse, plus everything that was discarded."""

    store: Store = field(default_factory=Store)
    issues: list[ParseIssue] = field(default_factory=list)
    section: str = DEFAULT_SECTION  # section in effect at end of input

    @property
    def ok(self) -> bool:
        return not self.issues

    def report(self, line: int, kind: IssueKind, text: str) -> None:
        logger.debug("line %d: %s: %r", line, kind.value, text)
        self.issues.append(ParseIssue(line, kind, text))


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def parse(text: str, options: ParseOptions | None = None) -> Store:
    """Parse config *text* into a fresh Store."""
    return read_text(text, options).store


def read_text(
    text: str,
    options: ParseOptions | None = None,
    section: str = DEFAULT_SECTION,
) -> ParseResult:
    """Parse config *text*, starting in *section*, and keep the issue list."""
    if options is None:
        options = ParseOptions()
    style = options.comment_style
    result = ParseResult(section=section)

    lines = text.replace("\r\n", "\n").split("\n")
    i = 0
    while i < len(lines):
        lineno = i + 1
        line = lines[i]
        i += 1

        stripped = line.strip()
        if not stripped or is_comment_line(stripped, style):
            continue

        if stripped.startswith("["):
            name = _section_header(stripped, style)
            if name is None:
                result.report(lineno, IssueKind.MALFORMED_SECTION, stripped)
            else:
                result.section = name
            continue

        pair = split_key(line)
        if pair is None:
            result.report(lineno, IssueKind.MALFORMED_LINE, stripped)
            continue
        key, rest = pair

        # Delimited values may continue on the following lines; the
        # extent is recomputed over the whole buffer each time.
        rest = rest.lstrip()
        end = delimited_end(rest)
        while end == -1 and i < len(lines):
            rest += "\n" + lines[i]
            i += 1
            end = delimited_end(rest)

        if end == -1:
            result.report(lineno, IssueKind.UNTERMINATED_VALUE, key)
            continue
        if end is not None and is_call(rest) and strip_comment(rest[end:], style).strip():
            # a call followed by more text is a plain value
            end = None
        span = strip_comment(rest, style) if end is None else rest[:end]

        dropped: list[str] = []
        value = parse_value(span, dropped)
        for piece in dropped:
            result.report(lineno, IssueKind.DROPPED_ENTRY, piece)
        if value is None:
            result.report(lineno, IssueKind.MALFORMED_VALUE, span)
            continue
        result.store.set_value(result.section, key, value)

    if options.strict and result.issues:
        raise ConfigParseError(result.issues)
    return result


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------

def _section_header(stripped: str, style: CommentStyle) -> str | None:
    header = strip_comment(stripped, style).rstrip()
    if len(header) < 2 or not header.endswith("]"):
        return None
    return header[1:-1].strip()


def split_key(line: str) -> tuple[str, str] | None:
    """Split ``key = value`` into the key and the raw text after ``=``.

    Quoted keys are unescaped and must be followed by ``=``.  Unquoted keys
    end at the first unescaped ``=`` outside quotes.
    """
    text = line.lstrip()
    if text.startswith('"'):
        end = find_closing_quote(text, 1)
        if end == -1:
            return None
        after = text[end + 1:].lstrip()
        if not after.startswith("="):
            return None
        return unescape(text[1:end]), after[1:]

    eq = find_unescaped(text, "=")
    if eq == -1:
        return None
    key = text[:eq].strip()
    if not key:
        return None
    return key, text[eq + 1:]
