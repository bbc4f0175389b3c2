import stat
from collections.abc import Callable
from pathlib import Path

import pytest

from interncli.config import TestRunConfig


@pytest.fixture(autouse=True)
def _clean_executable_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer overrides of the runner/watcher out of the tests."""
    monkeypatch.delenv("INTERNCLI_RUNNER", raising=False)
    monkeypatch.delenv("INTERNCLI_WATCHER", raising=False)
    monkeypatch.delenv("INTERNCLI_CONF", raising=False)


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A throwaway JS project root, used as the current directory."""
    root = tmp_path / "my-app"
    root.mkdir()
    (root / "package.json").write_text('{"name": "my-app", "version": "1.0.0"}')
    (root / "intern").mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def make_executable(tmp_path: Path) -> Callable[[str, str], Path]:
    """Writes a small /bin/sh script standing in for intern or nodemon."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def messages() -> list[str]:
    """Collects everything written to the user-facing sink."""
    return []


@pytest.fixture
def default_config() -> TestRunConfig:
    return TestRunConfig()
