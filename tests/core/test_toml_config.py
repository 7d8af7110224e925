from __future__ import annotations

import pytest

from markdown_kit.core import config as core_config


def test_load_toml_parses_tables(tmp_path):
    path = tmp_path / "render.toml"
    path.write_text("[limits]\nmax_text_chars = 10\n", encoding="utf-8")

    assert core_config.load_toml(path) == {"limits": {"max_text_chars": 10}}


@pytest.mark.parametrize(
    ("prepare", "message"),
    [
        (lambda path: None, "not found"),
        (lambda path: path.mkdir(), "is a directory"),
        (lambda path: path.write_bytes(b"a = '\xff'\n"), "not UTF-8"),
        (lambda path: path.write_text("a = [\n"), "Invalid TOML"),
    ],
)
def test_load_toml_failures_share_one_error_type(tmp_path, prepare, message):
    path = tmp_path / "render.toml"
    prepare(path)

    with pytest.raises(core_config.TomlConfigError, match=message):
        core_config.load_toml(path)


def test_overlay_replaces_nested_values_in_place():
    defaults = {
        "fetch": {"timeout_seconds": 30.0},
        "logging": {"level": "INFO"},
    }

    result = core_config.overlay(defaults, {"fetch": {"timeout_seconds": 5}})

    assert result is defaults
    assert defaults == {
        "fetch": {"timeout_seconds": 5},
        "logging": {"level": "INFO"},
    }


def test_overlay_names_unknown_keys_with_their_section():
    with pytest.raises(core_config.TomlConfigError) as exc_info:
        core_config.overlay(
            {"limits": {"max_text_chars": 1}}, {"limits": {"rows": 2}}
        )

    assert "'limits.rows'" in str(exc_info.value)


def test_overlay_wants_tables_where_defaults_have_them():
    with pytest.raises(core_config.TomlConfigError, match="must be a table"):
        core_config.overlay({"limits": {"max_text_chars": 1}}, {"limits": 5})


def test_write_template_is_private_and_guarded(tmp_path):
    target = tmp_path / "config" / "render.toml"

    assert core_config.write_template(target, "a = 1\n") == target
    assert target.read_text(encoding="utf-8") == "a = 1\n"
    assert target.stat().st_mode & 0o777 == 0o600

    with pytest.raises(core_config.TomlConfigError, match="already exists"):
        core_config.write_template(target, "a = 2\n")

    core_config.write_template(target, "a = 2\n", force=True)
    assert target.read_text(encoding="utf-8") == "a = 2\n"
