"""godot_config — reader and writer for Godot-style typed INI config files."""

from .coerce import coerce
from .document import ConfigFile
from .encoder import encode
from .errors import ConfigError, ConfigParseError
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
    from_python,
    to_python,
)
from .parser import IssueKind, ParseIssue, ParseOptions, ParseResult, parse, read_text
from .reader import parse_value
from .repl import ConfigRepl
from .scanner import CommentStyle

__all__ = [
    "parse",
    "read_text",
    "parse_value",
    "encode",
    "coerce",
    "ConfigFile",
    "ConfigRepl",
    "Store",
    "DEFAULT_SECTION",
    "Value",
    "VBool",
    "VInt",
    "VFloat",
    "VText",
    "VList",
    "VDict",
    "from_python",
    "to_python",
    "CommentStyle",
    "ParseOptions",
    "ParseResult",
    "ParseIssue",
    "IssueKind",
    "ConfigError",
    "ConfigParseError",
]
