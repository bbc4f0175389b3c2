# src/interncli/project.py

"""
Locates the calling project's root directory and name.
"""

import json
import tomllib
from pathlib import Path

import structlog

from interncli.telemetry import StructLogger

log: StructLogger = structlog.get_logger("project")

PROJECT_MARKERS = ("package.json", "pyproject.toml")


def find_project_root(start: Path | str | None = None) -> Path:
    """
    Returns the nearest directory at or above `start` holding a project marker.

    Falls back to `start` itself when no marker is found.
    """
    origin = Path(start or Path.cwd()).resolve()
    if origin.is_file():
        origin = origin.parent
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).is_file() for marker in PROJECT_MARKERS):
            log.debug("Project root resolved", root=str(candidate), emoji_key="path")
            return candidate
    log.debug("No project marker found, using start directory", root=str(origin))
    return origin


def _name_from_package_json(root: Path) -> str | None:
    manifest = root / "package.json"
    if not manifest.is_file():
        return None
    try:
        name = json.loads(manifest.read_text(encoding="utf-8")).get("name")
    except (OSError, ValueError, AttributeError) as e:
        log.warning("Could not read package.json", path=str(manifest), error=str(e))
        return None
    return name if isinstance(name, str) and name else None


def _name_from_pyproject(root: Path) -> str | None:
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return None
    try:
        with open(pyproject, "rb") as f:
            name = tomllib.load(f).get("project", {}).get("name")
    except (OSError, tomllib.TOMLDecodeError) as e:
        log.warning("Could not read pyproject.toml", path=str(pyproject), error=str(e))
        return None
    return name if isinstance(name, str) and name else None


def get_project_name(root: Path | str | None = None) -> str:
    """Returns a stable identifier for the project rooted at `root`."""
    project_root = Path(root) if root is not None else find_project_root()
    return (
        _name_from_package_json(project_root)
        or _name_from_pyproject(project_root)
        or project_root.name
    )


# 🔼⚙️
