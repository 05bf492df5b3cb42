"""Tests for the trellis CLI (render and paths commands)."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from trellis.cli import parse_options
from trellis.cli._dispatcher import build_parser, main
from trellis.core.exceptions import ConfigError


@pytest.fixture
def project(tmp_path: Path, make_template, template_root: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    make_template("default", {"title.j2": "Title: {{ title }}\n"})
    make_template(
        "default/html",
        {"title.j2": "<h1>{{ h(title) }}</h1>\n"},
        manifest={"sections": ["title", "separator"], "defaults": {"title": "Untitled"}},
    )
    return template_root


def test_parser_registers_commands() -> None:
    parser = build_parser()
    args = parser.parse_args(["render", "default/html", "-o", "a=1"])
    assert args.command == "render"
    assert args.option == ["a=1"]


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "usage: trellis" in capsys.readouterr().out


def test_render_to_stdout(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["render", "default/html", "--templates", str(project), "-f", "html", "-o", "title=<b>"])

    assert code == 0
    assert capsys.readouterr().out == "<h1>&lt;b&gt;</h1>\n<hr />\n"


def test_render_uses_manifest_defaults(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["render", "default/html", "-t", str(project), "-f", "html"]) == 0
    assert capsys.readouterr().out == "<h1>Untitled</h1>\n<hr />\n"


def test_render_text_format(project: Path, make_template, capsys: pytest.CaptureFixture[str]) -> None:
    make_template("default/text", manifest={"sections": ["title", "separator"]})
    assert main(["render", "default/text", "-t", str(project), "-f", "text", "-o", "width=5", "-o", "title=T"]) == 0
    assert capsys.readouterr().out == "Title: T\n-----\n"


def test_render_json_output(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["render", "default/html", "-t", str(project), "-f", "html", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["path"] == "default/html"
    assert payload["options"] == {"format": "html"}
    assert payload["output"] == "<h1>Untitled</h1>\n<hr />\n"


def test_render_missing_template_reports_error(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["render", "nope", "-t", str(project), "--json"]) == 1
    error = json.loads(capsys.readouterr().err)
    assert error["error"] == "TemplateNotFoundError"
    assert error["context"]["path"] == "nope"


def test_render_syntax_error_reports_location(
    project: Path, make_template, capsys: pytest.CaptureFixture[str]
) -> None:
    make_template("broken", {"a.j2": "{% if %}"}, manifest={"sections": ["a"]})
    assert main(["render", "broken", "-t", str(project)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: ")
    assert "a.j2:1:" in err


def test_render_reads_project_config(project: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "trellis.yaml").write_text("templates:\n  paths: [templates]\n", encoding="utf-8")
    assert main(["render", "default", "-o", "title=x"]) == 0
    assert capsys.readouterr().out == ""


def test_paths_command(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["paths", "default/html", "-t", str(project), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["search_paths"] == [str(project / "default" / "html"), str(project / "default")]
    assert payload["ancestors"] == ["default"]


def test_paths_command_text(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["paths", "default/html", "-t", str(project)]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "default/html:"
    assert "composes: default" in out


def test_parse_options_reads_yaml_scalars() -> None:
    assert parse_options(["n=3", "flag=true", "name=Bob", "empty=", "list=[1, 2]"]) == {
        "n": 3,
        "flag": True,
        "name": "Bob",
        "empty": "",
        "list": [1, 2],
    }


def test_parse_options_rejects_missing_separator() -> None:
    with pytest.raises(ConfigError):
        parse_options(["novalue"])


def test_render_undefined_variable_reports_error(
    project: Path, make_template, capsys: pytest.CaptureFixture[str]
) -> None:
    make_template("strict", {"a.j2": "{{ nope }}"}, manifest={"sections": ["a"]})
    assert main(["render", "strict", "-t", str(project), "--json"]) == 1
    error = json.loads(capsys.readouterr().err)
    assert error["error"] == "UndefinedError"
    assert "nope" in error["message"]
