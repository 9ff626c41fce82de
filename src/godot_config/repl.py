"""ConfigRepl — interactive shell for inspecting and editing config files.

Also provides the ``godot-config-repl`` CLI entry point via ``main()``.
"""

from __future__ import annotations

import sys
from typing import IO

from .document import ConfigFile
from .encoder import format_value
from .model import DEFAULT_SECTION, Value, VDict, VList
from .parser import ParseIssue, read_text
from .reader import unquote


# ---------------------------------------------------------------------------
# ConfigRepl class (notebook / programmatic use)
# ---------------------------------------------------------------------------

class ConfigRepl:
    """Stateful shell that accumulates config text across calls.

    Usage::

        repl = ConfigRepl()
        repl.eval("[window]")
        repl.eval("width=1920")          # lands in [window]
        repl.lookup("[window] width")    # -> VInt(1920)

        repl.doc.dumps()   # encoded text of everything entered
        repl.reset()       # clear state
    """

    def __init__(self) -> None:
        self.doc = ConfigFile()
        self.section = DEFAULT_SECTION
        self.last_issues: list[ParseIssue] = []

    def eval(self, text: str) -> list[ParseIssue]:
        """Parse *text* in the current section and merge it, overwriting.

        Returns the issues found in *text*.
        """
        result = read_text(text, self.doc.options, section=self.section)
        self.doc.merge(ConfigFile(store=result.store), overwrite=True)
        self.section = result.section
        self.last_issues = result.issues
        return result.issues

    def load(self, path: str) -> None:
        self.doc.load(path)
        self.section = DEFAULT_SECTION
        self.last_issues = self.doc.issues

    def lookup(self, ref: str) -> Value | None:
        """Resolve ``key`` (current section) or ``[section] key``."""
        ref = ref.strip()
        section = self.section
        if ref.startswith("["):
            close = ref.find("]")
            if close == -1:
                return None
            section = ref[1:close].strip()
            ref = ref[close + 1:].strip()
        key = unquote(ref) if ref.startswith('"') else ref
        if key is None:
            return None
        return self.doc.get_raw(section, key)

    def reset(self) -> None:
        """Clear all accumulated state."""
        self.doc = ConfigFile()
        self.section = DEFAULT_SECTION
        self.last_issues = []


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def _fmt_inline(value: Value) -> str:
    """Format a single value for compact one-line display."""
    return format_value(value)


def _fmt_inspect(value: Value) -> str:
    """Pretty-print a value for inspect() / i()."""
    if isinstance(value, VDict):
        if not value.entries:
            return "VDict {}"
        width = max(len(k) for k in value.entries)
        lines = ["VDict {"]
        for k, v in value.entries.items():
            lines.append(f"  {k:<{width}}: {_fmt_inline(v)}")
        lines.append("}")
        return "\n".join(lines)

    if isinstance(value, VList):
        lines = ["VList ["]
        for i, v in enumerate(value.items, 1):
            lines.append(f"  {i}: {_fmt_inline(v)}")
        lines.append("]")
        return "\n".join(lines)

    return f"{type(value).__name__} {_fmt_inline(value)}"


def _show_sections(repl: ConfigRepl, dest: IO[str]) -> None:
    names = repl.doc.sections()
    if not names:
        print("  (no sections)", file=dest)
        return
    for name in names:
        label = f"[{name}]" if name else "(default)"
        print(f"  {label}  {len(repl.doc.keys(name))} key(s)", file=dest)


def _show_keys(repl: ConfigRepl, section: str, dest: IO[str]) -> None:
    keys = repl.doc.keys(section)
    if not keys:
        print("  (no keys)", file=dest)
        return
    width = max(len(k) for k in keys)
    for key in keys:
        value = repl.doc.get_raw(section, key)
        print(f"  {key:<{width}} = {_fmt_inline(value)}", file=dest)


def _show_issues(repl: ConfigRepl, dest: IO[str]) -> None:
    if not repl.last_issues:
        print("  (no issues)", file=dest)
        return
    for issue in repl.last_issues:
        print(f"  line {issue.line}: {issue.kind.value}: {issue.text!r}", file=dest)


def _show_value(repl: ConfigRepl, ref: str, dest: IO[str], pretty: bool) -> None:
    value = repl.lookup(ref)
    if value is None:
        print("  (not set)", file=dest)
    elif pretty:
        print(_fmt_inspect(value), file=dest)
    else:
        print(_fmt_inline(value), file=dest)


def _process_line(repl: ConfigRepl, line: str, dest: IO[str]) -> bool:
    """Process one input line.  Returns False when the session should end."""
    line = line.strip()
    if not line:
        return True

    # ── Exit ──────────────────────────────────────────────────────────────
    if line in (":q", ":quit"):
        return False

    # ── Control commands ──────────────────────────────────────────────────
    if line == ":sections":
        _show_sections(repl, dest)
        return True

    if line == ":keys" or line.startswith(":keys "):
        section = line[len(":keys"):].strip() or repl.section
        _show_keys(repl, section, dest)
        return True

    if line == ":dump":
        print(repl.doc.dumps(), end="", file=dest)
        return True

    if line == ":issues":
        _show_issues(repl, dest)
        return True

    if line == ":reset":
        repl.reset()
        return True

    # ── File commands ─────────────────────────────────────────────────────
    if line.startswith(":load "):
        filepath = line[6:].strip()
        try:
            repl.load(filepath)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"Error reading '{filepath}': {exc}", file=sys.stderr)
        return True

    if line.startswith(":save "):
        filepath = line[6:].strip()
        try:
            repl.doc.save(filepath)
        except OSError as exc:
            print(f"Error writing '{filepath}': {exc}", file=sys.stderr)
        return True

    # ── inspect() / i() ───────────────────────────────────────────────────
    for prefix in ("inspect(", "i("):
        if line.startswith(prefix) and line.endswith(")"):
            _show_value(repl, line[len(prefix):-1], dest, pretty=True)
            return True

    # ── ? lookup ──────────────────────────────────────────────────────────
    if line.startswith("? "):
        _show_value(repl, line[2:], dest, pretty=False)
        return True

    # ── Regular config input ──────────────────────────────────────────────
    repl.eval(line)
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Interactive shell (``godot-config-repl [file]``)."""
    repl = ConfigRepl()
    if len(sys.argv) > 1:
        _process_line(repl, f":load {sys.argv[1]}", sys.stdout)

    print("config REPL  (:q to quit  |  :sections  :keys  :dump  :issues  :reset"
          "  |  :load <file>  :save <file>  |  ? [section] key  inspect(...))")

    while True:
        try:
            line = input(f"[{repl.section}]> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue

        if not _process_line(repl, line, sys.stdout):
            break


if __name__ == "__main__":
    main()
