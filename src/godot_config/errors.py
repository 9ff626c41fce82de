"""Exception types for godot_config."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .parser import ParseIssue


class ConfigError(Exception):
    """Base class for godot_config errors."""


class ConfigParseError(ConfigError):
    """Raised by a strict parse when some input had to be discarded."""

    def __init__(self, issues: list[ParseIssue]) -> None:
        self.issues = issues
        first = issues[0]
        more = f" (+{len(issues) - 1} more)" if len(issues) > 1 else ""
        super().__init__(f"line {first.line}: {first.kind.value}: {first.text!r}{more}")
