"""ConfigFile — section/key facade over a Store, with file and stream I/O."""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from typing import IO, Any

import chardet

from .coerce import coerce
from .encoder import encode
from .model import Store, Value
from .parser import ParseIssue, ParseOptions, read_text

logger = logging.getLogger(__name__)


@dataclass
class ConfigFile:
    """Holds one parsed configuration.

    A ``None`` or empty section name always means the default section.

    Usage::

        cfg = ConfigFile()
        cfg.loads("[window]\\nwidth=1920\\n")
        cfg.get_value("window", "width", 0)          # -> 1920
        cfg.get_value("window", "width", as_type=float)
        cfg.set_value("window", "size", [1920, 1080])
        cfg.dumps()
    """

    store: Store = field(default_factory=Store)
    options: ParseOptions = field(default_factory=ParseOptions)

    def __post_init__(self) -> None:
        # Not a dataclass field — issues recorded by the most recent loads()
        self._issues: list[ParseIssue] = []

    @property
    def issues(self) -> list[ParseIssue]:
        return self._issues

    # -- Values ---------------------------------------------------------

    def set_value(self, section: str | None, key: str, value: object) -> None:
        self.store.set_value(section, key, value)

    def get_raw(self, section: str | None, key: str) -> Value | None:
        return self.store.get_raw(section, key)

    def get_value(
        self,
        section: str | None,
        key: str,
        default: Any = None,
        as_type: Any = None,
    ) -> Any:
        """Return the value converted to *as_type*, or *default*.

        When *as_type* is omitted it is taken from the type of *default*;
        with neither, the plain Python form of the value is returned.
        """
        raw = self.store.get_raw(section, key)
        if raw is None:
            return default
        if as_type is None:
            as_type = object if default is None else type(default)
        return coerce(raw, as_type, default)

    # -- Sections and keys ----------------------------------------------

    def has_section(self, section: str | None) -> bool:
        return self.store.has_section(section)

    def has_key(self, section: str | None, key: str) -> bool:
        return self.store.has_key(section, key)

    def erase_section(self, section: str | None) -> None:
        self.store.erase_section(section)

    def erase_key(self, section: str | None, key: str) -> None:
        self.store.erase_key(section, key)

    def sections(self) -> list[str]:
        return self.store.section_names()

    def keys(self, section: str | None = None) -> list[str]:
        return self.store.keys(section)

    def clear(self) -> None:
        self.store.clear()
        self._issues = []

    def merge(self, other: ConfigFile, overwrite: bool = False) -> None:
        """Copy every key of *other* into this file.

        Existing keys are only replaced when *overwrite* is true.
        """
        for section, entries in other.store.items():
            for key, value in entries.items():
                if overwrite or not self.store.has_key(section, key):
                    self.store.set_value(section, key, copy.deepcopy(value))

    # -- Text -----------------------------------------------------------

    def loads(self, text: str) -> None:
        """Replace the contents with the parse of *text*."""
        result = read_text(text, self.options)
        self.store = result.store
        self._issues = result.issues

    def dumps(self) -> str:
        return encode(self.store)

    def load_stream(self, fp: IO[str]) -> None:
        self.loads(fp.read())

    def save_stream(self, fp: IO[str]) -> None:
        fp.write(self.dumps())

    # -- Files ----------------------------------------------------------

    def load(self, path: str | os.PathLike[str], encoding: str | None = None) -> None:
        """Read and parse *path*.

        Decodes as *encoding* (UTF-8 with optional BOM by default) and falls
        back to ``chardet`` detection when the bytes do not decode.
        """
        with open(path, "rb") as fp:
            raw = fp.read()
        self.loads(_decode(raw, encoding, path))
        logger.debug("loaded %s: %d section(s), %d issue(s)",
                     path, len(self.store), len(self._issues))

    def save(self, path: str | os.PathLike[str], encoding: str = "utf-8") -> None:
        with open(path, "w", encoding=encoding, newline="\n") as fp:
            self.save_stream(fp)
        logger.debug("saved %s: %d section(s)", path, len(self.store))


def _decode(raw: bytes, encoding: str | None, path: object) -> str:
    codec = encoding or "utf-8-sig"
    try:
        return raw.decode(codec)
    except UnicodeDecodeError:
        guess = chardet.detect(raw)
        if not guess.get("encoding") or (guess.get("confidence") or 0) < 0.5:
            raise
        logger.warning("%s is not valid %s, decoding as %s (confidence %.2f)",
                       path, codec, guess["encoding"], guess["confidence"])
        return raw.decode(guess["encoding"])
