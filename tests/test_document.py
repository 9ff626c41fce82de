"""Tests for ConfigFile."""

import io

import pytest

from godot_config import (
    CommentStyle,
    ConfigFile,
    ConfigParseError,
    IssueKind,
    ParseOptions,
    VInt,
    VList,
)


@pytest.fixture
def cfg():
    c = ConfigFile()
    c.set_value("", "name", "Godot")
    c.set_value("", "version", 3.4)
    c.set_value("window", "width", 1920)
    c.set_value("window", "height", 1080)
    c.set_value("graphics", "quality", "high")
    c.set_value("graphics", "vsync", True)
    return c


# ---------------------------------------------------------------------------
# get_value
# ---------------------------------------------------------------------------

def test_get_value_typed_by_default(cfg):
    assert cfg.get_value("window", "width", 0) == 1920
    assert cfg.get_value("", "version", 0.0) == 3.4
    assert cfg.get_value("graphics", "vsync", False) is True
    assert cfg.get_value("graphics", "quality", "") == "high"

def test_get_value_native_without_default(cfg):
    assert cfg.get_value(None, "name") == "Godot"

def test_get_value_missing_returns_default(cfg):
    assert cfg.get_value("", "non_existent", "default") == "default"
    assert cfg.get_value("", "non_existent") is None

def test_get_value_conversion_failure_returns_default(cfg):
    assert cfg.get_value("graphics", "quality", 5) == 5

def test_get_value_explicit_type(cfg):
    assert cfg.get_value("window", "width", as_type=float) == 1920.0
    assert cfg.get_value("window", "width", as_type=str) == "1920"

def test_get_value_collections():
    c = ConfigFile()
    c.loads('sizes=[1, 2, 3]\nmap={"a": [1.5], "b": []}\n')
    assert c.get_value("", "sizes", as_type=list[int]) == [1, 2, 3]
    assert c.get_value("", "map", as_type=dict[str, list[float]]) == {"a": [1.5], "b": []}
    assert c.get_raw("", "sizes") == VList([VInt(1), VInt(2), VInt(3)])

def test_special_characters_survive(cfg):
    special = "!@#$%^&*()_+-=[]{}|;:,.<>?\"'\n\t"
    cfg.set_value("", "special_chars", special)
    other = ConfigFile()
    other.loads(cfg.dumps())
    assert other.get_value("", "special_chars") == special

def test_large_numbers(cfg):
    cfg.set_value("", "large_long", 2 ** 63 - 1)
    cfg.set_value("", "large_float", 3.4028234663852886e38)
    other = ConfigFile()
    other.loads(cfg.dumps())
    assert other.get_value("", "large_long", 0) == 2 ** 63 - 1
    assert other.get_value("", "large_float", 0.0) == 3.4028234663852886e38


# ---------------------------------------------------------------------------
# Sections, keys, erase, clear
# ---------------------------------------------------------------------------

def test_presence(cfg):
    assert cfg.has_section("window")
    assert not cfg.has_section("audio")
    assert cfg.has_key("window", "width")
    assert not cfg.has_key("window", "vsync")

def test_enumeration(cfg):
    assert cfg.sections() == ["", "window", "graphics"]
    assert cfg.keys("window") == ["width", "height"]
    assert cfg.keys() == ["name", "version"]

def test_erase(cfg):
    cfg.erase_key("", "version")
    assert not cfg.has_key("", "version")
    cfg.erase_key("window", "height")
    assert cfg.has_key("window", "width")
    cfg.erase_section("window")
    assert not cfg.has_section("window")
    assert cfg.has_section("graphics")
    cfg.clear()
    assert cfg.sections() == []

def test_empty_config():
    c = ConfigFile()
    assert c.sections() == []
    assert c.keys() == []
    assert c.dumps() == ""
    c.loads("")
    assert c.sections() == []


# ---------------------------------------------------------------------------
# merge
# ---------------------------------------------------------------------------

def _incoming():
    c = ConfigFile()
    c.set_value("", "name", "Godot Engine")
    c.set_value("", "author", "Godot Contributors")
    c.set_value("window", "width", 3840)
    c.set_value("window", "vsync", True)
    return c

def test_merge_without_overwrite(cfg):
    cfg.merge(_incoming())
    assert cfg.get_value("", "name") == "Godot"
    assert cfg.get_value("", "author") == "Godot Contributors"
    assert cfg.get_value("window", "width") == 1920
    assert cfg.get_value("window", "height") == 1080
    assert cfg.get_value("window", "vsync") is True

def test_merge_with_overwrite(cfg):
    cfg.merge(_incoming(), overwrite=True)
    assert cfg.get_value("", "name") == "Godot Engine"
    assert cfg.get_value("window", "width") == 3840

def test_merge_copies_values():
    source = ConfigFile()
    source.set_value("", "arr", [1])
    target = ConfigFile()
    target.merge(source)
    target.get_raw("", "arr").items.append(VInt(2))
    assert source.get_value("", "arr") == [1]


# ---------------------------------------------------------------------------
# Text, streams and files
# ---------------------------------------------------------------------------

def test_stream_round_trip(cfg):
    buf = io.StringIO()
    cfg.save_stream(buf)
    text = buf.getvalue()
    assert "name=Godot" in text
    assert "version=3.4" in text
    assert "[window]" in text
    assert "quality=high" in text

    loaded = ConfigFile()
    loaded.load_stream(io.StringIO(text))
    assert loaded.store == cfg.store

def test_loads_replaces_contents(cfg):
    cfg.loads("x=1\n")
    assert cfg.sections() == [""]
    assert cfg.keys() == ["x"]

def test_loads_records_issues():
    c = ConfigFile()
    c.loads("ok=1\nbroken\n")
    assert [i.kind for i in c.issues] == [IssueKind.MALFORMED_LINE]
    c.clear()
    assert c.issues == []

def test_options_comment_style():
    c = ConfigFile(options=ParseOptions(comment_style=CommentStyle.SIMPLE))
    c.loads("width=1920 # px\n")
    assert c.get_value("", "width", 0) == 1920

def test_options_strict():
    c = ConfigFile(options=ParseOptions(strict=True))
    with pytest.raises(ConfigParseError):
        c.loads("broken\n")

def test_file_round_trip(cfg, tmp_path):
    path = tmp_path / "settings.cfg"
    cfg.save(path)
    assert "\r\n" not in path.read_text(encoding="utf-8")
    loaded = ConfigFile()
    loaded.load(path)
    assert loaded.store == cfg.store

def test_load_utf8_bom(tmp_path):
    path = tmp_path / "bom.cfg"
    path.write_bytes(b"\xef\xbb\xbf" + "name=Café\n".encode("utf-8"))
    c = ConfigFile()
    c.load(path)
    assert c.get_value("", "name") == "Café"

def test_load_explicit_encoding(tmp_path):
    path = tmp_path / "latin.cfg"
    path.write_bytes("name=Café\n".encode("latin-1"))
    c = ConfigFile()
    c.load(path, encoding="latin-1")
    assert c.get_value("", "name") == "Café"

def test_load_falls_back_to_detected_encoding(tmp_path, monkeypatch):
    import godot_config.document as document

    path = tmp_path / "legacy.cfg"
    path.write_bytes("name=Café\n".encode("latin-1"))
    monkeypatch.setattr(
        document.chardet, "detect",
        lambda raw: {"encoding": "latin-1", "confidence": 0.99},
    )
    c = ConfigFile()
    c.load(path)
    assert c.get_value("", "name") == "Café"

def test_load_undetectable_encoding_raises(tmp_path, monkeypatch):
    import godot_config.document as document

    path = tmp_path / "garbage.cfg"
    path.write_bytes(b"name=\xff\xfe\xfa\n")
    monkeypatch.setattr(
        document.chardet, "detect",
        lambda raw: {"encoding": None, "confidence": 0.0},
    )
    with pytest.raises(UnicodeDecodeError):
        ConfigFile().load(path)

def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        ConfigFile().load(tmp_path / "missing.cfg")
