"""Data model for godot_config values and the section store."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

DEFAULT_SECTION = ""


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class VBool:
    value: bool


@dataclass(slots=True)
class VInt:
    value: int  # signed 64-bit


@dataclass(slots=True)
class VFloat:
    value: float


@dataclass(slots=True)
class VText:
    value: str


@dataclass(slots=True)
class VList:
    items: list[Value] = field(default_factory=list)


@dataclass(slots=True)
class VDict:
    entries: dict[str, Value] = field(default_factory=dict)  # insertion order


Value = Union[VBool, VInt, VFloat, VText, VList, VDict]

VALUE_TYPES = (VBool, VInt, VFloat, VText, VList, VDict)


# ---------------------------------------------------------------------------
# Python <-> Value conversion
# ---------------------------------------------------------------------------

def from_python(obj: object) -> Value:
    """Wrap a native Python object into a Value.

    Values pass through unchanged; ``bool`` is checked before ``int``.
    Lists and tuples become VList, mappings become VDict (keys via ``str``).
    """
    if isinstance(obj, VALUE_TYPES):
        return obj
    if isinstance(obj, bool):
        return VBool(obj)
    if isinstance(obj, int):
        if not INT64_MIN <= obj <= INT64_MAX:
            raise ValueError(f"integer out of 64-bit range: {obj}")
        return VInt(obj)
    if isinstance(obj, float):
        return VFloat(obj)
    if isinstance(obj, str):
        return VText(obj)
    if isinstance(obj, (list, tuple)):
        return VList([from_python(item) for item in obj])
    if isinstance(obj, dict):
        return VDict({str(k): from_python(v) for k, v in obj.items()})
    raise TypeError(f"cannot store {type(obj).__name__} in a config file")


def to_python(value: Value) -> object:
    """Unwrap a Value into plain Python objects, recursively."""
    if isinstance(value, VList):
        return [to_python(item) for item in value.items]
    if isinstance(value, VDict):
        return {k: to_python(v) for k, v in value.entries.items()}
    return value.value


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

def _section_name(section: str | None) -> str:
    return section or DEFAULT_SECTION


def check_section_name(name: str) -> None:
    """Reject names a ``[header]`` line cannot carry; headers have no escapes."""
    if "\n" in name or "\r" in name:
        raise ValueError(f"line break in section name: {name!r}")
    if name != name.strip():
        raise ValueError(f"section name has surrounding whitespace: {name!r}")


@dataclass
class Store:
    """Ordered section -> key -> Value mapping.

    Sections only exist while they hold at least one key.
    """

    sections: dict[str, dict[str, Value]] = field(default_factory=dict)

    # -- Values ---------------------------------------------------------

    def set_value(self, section: str | None, key: str, value: object) -> None:
        name = _section_name(section)
        if name not in self.sections:
            check_section_name(name)
        entries = self.sections.setdefault(name, {})
        entries[key] = from_python(value)

    def get_raw(self, section: str | None, key: str) -> Value | None:
        entries = self.sections.get(_section_name(section))
        if entries is None:
            return None
        return entries.get(key)

    # -- Presence -------------------------------------------------------

    def has_section(self, section: str | None) -> bool:
        return _section_name(section) in self.sections

    def has_key(self, section: str | None, key: str) -> bool:
        entries = self.sections.get(_section_name(section))
        return entries is not None and key in entries

    # -- Removal --------------------------------------------------------

    def erase_section(self, section: str | None) -> None:
        self.sections.pop(_section_name(section), None)

    def erase_key(self, section: str | None, key: str) -> None:
        name = _section_name(section)
        entries = self.sections.get(name)
        if entries is None:
            return
        entries.pop(key, None)
        if not entries:
            del self.sections[name]

    def clear(self) -> None:
        self.sections.clear()

    # -- Enumeration ----------------------------------------------------

    def section_names(self) -> list[str]:
        return list(self.sections)

    def keys(self, section: str | None) -> list[str]:
        return list(self.sections.get(_section_name(section), {}))

    def items(self) -> Iterator[tuple[str, dict[str, Value]]]:
        return iter(self.sections.items())

    def __len__(self) -> int:
        return len(self.sections)
