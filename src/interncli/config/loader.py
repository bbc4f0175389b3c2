#
# config/loader.py
#
"""
Loads a TestRunConfig from a TOML file.

Either a top-level table or a `[tool.interncli]` table (as found in a
pyproject.toml) is accepted. Keys may be written in snake_case or in the
camelCase used by the Intern command line (`remoteUnit`, `childConfig`, ...).
"""

import re
import tomllib
from pathlib import Path
from typing import Any

import attrs
import structlog

from interncli.config.models import ExternalDependency, ExternalsConfig, TestRunConfig
from interncli.exceptions import ConfigurationError
from interncli.telemetry import StructLogger

log: StructLogger = structlog.get_logger("config.loader")

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")
_FIELD_NAMES = {a.name for a in attrs.fields(TestRunConfig)}
_DEPENDENCY_KEYS = {"type", "from", "to", "name", "inject"}


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _convert_dependency(raw: Any, path: Path) -> str | ExternalDependency:
    if isinstance(raw, str):
        return raw
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Invalid externals dependency entry: {raw!r}", str(path))
    unknown = set(raw) - _DEPENDENCY_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown externals dependency keys: {sorted(unknown)}", str(path))
    if "from" not in raw:
        raise ConfigurationError("Externals dependency is missing required key 'from'", str(path))
    try:
        return ExternalDependency(
            from_=raw["from"],
            type=raw.get("type"),
            to=raw.get("to"),
            name=raw.get("name"),
            inject=raw.get("inject"),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid externals dependency: {e}", str(path)) from e


def _convert_externals(raw: Any, path: Path) -> ExternalsConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError("'externals' must be a table", str(path))
    output_path = raw.get("outputPath", raw.get("output_path"))
    dependencies = raw.get("dependencies", [])
    if not isinstance(dependencies, list):
        raise ConfigurationError("'externals.dependencies' must be an array", str(path))
    return ExternalsConfig(
        output_path=output_path,
        dependencies=[_convert_dependency(dep, path) for dep in dependencies],
    )


def config_from_mapping(data: dict[str, Any], path: Path | None = None) -> TestRunConfig:
    """Builds a TestRunConfig from an already-parsed mapping."""
    source = path or Path("<mapping>")
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _snake(key)
        if name not in _FIELD_NAMES:
            raise ConfigurationError(f"Unknown configuration key '{key}'", str(source))
        kwargs[name] = value

    if "externals" in kwargs and kwargs["externals"] is not None:
        kwargs["externals"] = _convert_externals(kwargs["externals"], source)

    try:
        return TestRunConfig(**kwargs)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration value: {e}", str(source)) from e


def load_config(config_path: Path) -> TestRunConfig:
    """Reads and validates a TOML configuration file."""
    load_log = log.bind(config_path=str(config_path))
    load_log.debug("Loading configuration")

    try:
        with open(config_path, "rb") as f:
            document = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError("Configuration file not found", str(config_path)) from e
    except tomllib.TOMLDecodeError as e:
        load_log.error("Invalid TOML", error=str(e))
        raise ConfigurationError(f"Invalid TOML: {e}", str(config_path)) from e

    if "tool" in document:
        tool = document["tool"]
        table = tool.get("interncli") if isinstance(tool, dict) else None
        if not isinstance(table, dict):
            raise ConfigurationError("No [tool.interncli] table found", str(config_path))
    else:
        table = document
    config = config_from_mapping(table, config_path)
    load_log.info("Configuration loaded", child_config=config.child_config, watch=config.watch)
    return config


# 🔼⚙️
