"""Tests for layered engine configuration."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from trellis.core.config import ConfigManager, TemplatesConfig
from trellis.core.exceptions import ConfigError


def write_yaml(path: Path, content: str) -> Path:
    """Helper to write YAML content to a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_bundled_defaults(tmp_path: Path) -> None:
    cfg = TemplatesConfig(ConfigManager(tmp_path).load_config())

    assert cfg.paths == []
    assert cfg.extension == ".j2"
    assert cfg.setup_file == "setup.py"
    assert cfg.manifest_file == "template.yaml"
    assert cfg.jinja["strict_undefined"] is True
    assert cfg.log_level == "WARNING"


def test_project_file_overrides_defaults(tmp_path: Path) -> None:
    write_yaml(
        tmp_path / "trellis.yaml",
        """
        templates:
          paths: [templates, /abs/templates]
          extension: ".tpl"
        jinja:
          trim_blocks: false
        """,
    )
    cfg = TemplatesConfig(ConfigManager(tmp_path).load_config())

    assert cfg.paths == [(tmp_path / "templates").resolve(), Path("/abs/templates")]
    assert cfg.extension == ".tpl"
    assert cfg.jinja["trim_blocks"] is False
    assert cfg.jinja["lstrip_blocks"] is True


def test_explicit_config_file_anchors_relative_paths(tmp_path: Path) -> None:
    config_file = write_yaml(tmp_path / "conf" / "engine.yaml", "templates:\n  paths: [../tpl]\n")
    cfg = TemplatesConfig(ConfigManager(tmp_path / "elsewhere", config_file).load_config())
    assert cfg.paths == [(tmp_path / "tpl").resolve()]


def test_missing_explicit_config_file_fails(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        ConfigManager(tmp_path, tmp_path / "missing.yaml").load_config()


def test_non_mapping_config_file_fails(tmp_path: Path) -> None:
    write_yaml(tmp_path / "trellis.yaml", "- just\n- a list\n")
    with pytest.raises(ConfigError, match="mapping"):
        ConfigManager(tmp_path).load_config()


def test_unknown_keys_fail_validation(tmp_path: Path) -> None:
    write_yaml(tmp_path / "trellis.yaml", "templates:\n  extensoin: .txt\n")
    with pytest.raises(ConfigError) as excinfo:
        ConfigManager(tmp_path).load_config()
    assert any("extensoin" in err for err in excinfo.value.context["errors"])


def test_validation_can_be_skipped(tmp_path: Path) -> None:
    write_yaml(tmp_path / "trellis.yaml", "custom:\n  key: 1\n")
    assert ConfigManager(tmp_path).load_config(validate=False)["custom"] == {"key": 1}


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRELLIS_TEMPLATES__EXTENSION", ".txt")
    monkeypatch.setenv("TRELLIS_JINJA__STRICT_UNDEFINED", "false")
    monkeypatch.setenv("TRELLIS_LOGGING__LEVEL", "DEBUG")

    cfg = TemplatesConfig(ConfigManager(tmp_path).load_config())

    assert cfg.extension == ".txt"
    assert cfg.jinja["strict_undefined"] is False
    assert cfg.log_level == "DEBUG"


def test_environment_json_list_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRELLIS_TEMPLATES__PATHS", '["/a", "/b"]')
    cfg = TemplatesConfig(ConfigManager(tmp_path).load_config())
    assert cfg.paths == [Path("/a"), Path("/b")]


def test_malformed_environment_key_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRELLIS_TEMPLATES____X", "1")
    with pytest.raises(ConfigError, match="empty segment"):
        ConfigManager(tmp_path).load_config()


def test_env_paths_replace_project_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRELLIS_TEMPLATES__PATHS", '["/base"]')
    write_yaml(tmp_path / "trellis.yaml", "templates:\n  paths: [extra]\n")

    # Environment overrides are applied last and replace the list.
    cfg = TemplatesConfig(ConfigManager(tmp_path).load_config())
    assert cfg.paths == [Path("/base")]

    monkeypatch.delenv("TRELLIS_TEMPLATES__PATHS")
    cfg = TemplatesConfig(ConfigManager(tmp_path).load_config())
    assert cfg.paths == [(tmp_path / "extra").resolve()]
