from __future__ import annotations

import os
import sys
import textwrap
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest
import yaml

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'trellis'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from trellis.core.stdlib_logging import reset_logging_for_tests  # noqa: E402
from trellis.core.templates import TemplateRegistry  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    """Drop TRELLIS_* overrides from the outer environment and reset logging."""
    for key in list(os.environ):
        if key.startswith("TRELLIS_"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_logging_for_tests()


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    root = tmp_path / "templates"
    root.mkdir()
    return root


MakeTemplate = Callable[..., Path]


@pytest.fixture
def make_template(template_root: Path) -> MakeTemplate:
    """Create a template directory under ``template_root``.

    Args (of the returned helper):
        path: Logical template path ("default/html")
        files: Mapping of file name to exact content
        manifest: Optional template.yaml content (dumped as YAML)
        setup: Optional setup.py source (dedented)
        root: Alternative template root
    """

    def _make(
        path: str,
        files: Optional[Dict[str, str]] = None,
        *,
        manifest: Optional[dict] = None,
        setup: Optional[str] = None,
        root: Optional[Path] = None,
    ) -> Path:
        directory = (root or template_root) / path
        directory.mkdir(parents=True, exist_ok=True)
        for name, content in (files or {}).items():
            (directory / name).write_text(content, encoding="utf-8")
        if manifest is not None:
            (directory / "template.yaml").write_text(yaml.safe_dump(manifest), encoding="utf-8")
        if setup is not None:
            (directory / "setup.py").write_text(textwrap.dedent(setup), encoding="utf-8")
        return directory

    return _make


@pytest.fixture
def registry(template_root: Path) -> TemplateRegistry:
    return TemplateRegistry([template_root])
