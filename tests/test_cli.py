from __future__ import annotations

import json
import types

import pytest

from markdown_kit import cli


@pytest.fixture(autouse=True)
def pinned_version(monkeypatch):
    def version(name: str) -> str:
        assert name == "markdown-kit"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", version)


def _stub_module(monkeypatch, main):
    imported: list[str] = []

    def fake_import(name):
        imported.append(name)
        return types.SimpleNamespace(main=main)

    monkeypatch.setattr(cli, "import_module", fake_import)
    return imported


def test_no_arguments_prints_usage_and_fails(capsys):
    assert cli.main([]) == 2

    out = capsys.readouterr().out
    assert out.startswith("Usage: mdkit <command>")
    assert "Available commands:" in out


@pytest.mark.parametrize("argv", [["--help"], ["-h"], ["help"]])
def test_help_flags(argv, capsys):
    assert cli.main(argv) == 0
    assert "Usage: mdkit" in capsys.readouterr().out


def test_list_shows_every_command(capsys):
    assert cli.main(["list"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Available commands:"
    assert [line.split()[0] for line in lines[1:]] == ["init", "render"]


def test_help_for_one_command(capsys):
    assert cli.main(["help", "render"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("render: Convert one JSON")
    assert "`mdkit render --help`" in out


@pytest.mark.parametrize("argv", [["bogus"], ["help", "bogus"]])
def test_unknown_commands_fail_on_stderr(argv, capsys):
    assert cli.main(argv) == 2

    err = capsys.readouterr().err
    assert "Unknown command 'bogus'." in err
    assert "Available commands:" in err


@pytest.mark.parametrize("flag", ["version", "--version", "-V"])
def test_version_flags(flag, capsys):
    assert cli.main([flag]) == 0
    assert capsys.readouterr().out == "0.0-test\n"


def test_version_without_installed_distribution(monkeypatch, capsys):
    def missing(name):
        raise cli.metadata.PackageNotFoundError(name)

    monkeypatch.setattr(cli.metadata, "version", missing)

    assert cli.main(["version"]) == 0
    assert capsys.readouterr().out == "unknown\n"


def test_command_module_is_imported_on_demand(monkeypatch):
    received = []
    imported = _stub_module(monkeypatch, lambda argv: received.append(argv))

    assert cli.main(["render", "json", "--text", "[]"]) == 0

    assert imported == ["markdown_kit.render.cli"]
    assert received == [["json", "--text", "[]"]]


def test_integer_results_become_the_exit_status(monkeypatch):
    _stub_module(monkeypatch, lambda argv: 7)

    assert cli.main(["init"]) == 7


@pytest.mark.parametrize(
    ("code", "expected", "err"),
    [
        (5, 5, ""),
        (None, 0, ""),
        ("fatal: bad input", 1, "fatal: bad input\n"),
    ],
)
def test_system_exit_is_translated(monkeypatch, capsys, code, expected, err):
    def main(argv):
        raise SystemExit(code)

    _stub_module(monkeypatch, main)

    assert cli.main(["render"]) == expected
    assert capsys.readouterr().err == err


def test_init_end_to_end(tmp_path, capsys):
    target = tmp_path / "ws"

    assert cli.main(["init", "--path", str(target)]) == 0

    assert "Workspace ready" in capsys.readouterr().out
    assert (target / "config" / "render.toml").is_file()
    assert (target / "logs").is_dir()


def test_render_json_end_to_end(tmp_path, capsys):
    code = cli.main(
        [
            "render",
            "json",
            "--workspace",
            str(tmp_path / "ws"),
            "--envelope",
            "--text",
            '[{"a": 1, "b": null}]',
        ]
    )

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {
        "success": True,
        "markdown": "| a | b |\n| --- | --- |\n| 1 |  |\n",
    }


def test_render_argument_errors_become_exit_status(capsys):
    assert cli.main(["render", "docx", "--text", "x"]) == 2
    assert "invalid choice" in capsys.readouterr().err
