# src/interncli/arguments.py

"""
Translates a TestRunConfig into the argument vector understood by Intern.

The runner reads `key=value` arguments left to right and the last value for a
key wins, so the order in which arguments are emitted here is significant.
Empty values (`suites=`, `environments=`, `functionalSuites=`) clear the
defaults set in the Intern config file.
"""

import json
import os
from pathlib import Path
from typing import Any

import structlog

from interncli.config.models import TestRunConfig
from interncli.exceptions import ConfigurationError
from interncli.project import find_project_root, get_project_name
from interncli.reporters import BareReporter, ensure_output_dirs, lookup_reporter, reporter_options
from interncli.telemetry import StructLogger

log: StructLogger = structlog.get_logger("arguments")

INTERN_CONFIG_DIR = "intern"
EXTERNALS_LOADER_SCRIPT = "node_modules/@dojo/cli-test-intern/loaders/externals.js"
DEFAULT_REPORTER = "runner"

# Extra capabilities per remote provider child config.
PROVIDER_CAPABILITIES: dict[str, dict[str, str]] = {
    "browserstack": {"fixSessionCapabilities": "false", "browserstack.debug": "false"},
    "saucelabs": {"fixSessionCapabilities": "false"},
}


def _arg(key: str, value: Any) -> str:
    if isinstance(value, str):
        return f"{key}={value}"
    return f"{key}={json.dumps(value)}"


def validate_config(config: TestRunConfig) -> None:
    """Raises ConfigurationError if the config cannot be turned into arguments."""
    if config.externals is not None and not config.child_config:
        raise ConfigurationError(
            "Dojo JIT does not currently support externals, "
            "please specify a config option to run tests against the built code"
        )


def config_argument(config: TestRunConfig, package_root: Path, cwd: Path) -> str:
    config_name = config.intern_config
    if config.child_config:
        config_name += f"@{config.child_config}"
    config_path = package_root / INTERN_CONFIG_DIR / config_name
    return _arg("config", os.path.relpath(config_path, cwd))


def reporter_arguments(reporters: str, cwd: Path) -> list[str]:
    """
    Resolves a comma-separated reporter list.

    Unknown names are dropped. Choosing any console reporter replaces the
    default `runner` reporter; otherwise `runner` is kept ahead of the file
    reporters so console output is not lost.
    """
    include_runner = True
    formatted: list[str] = []

    for name in (part.strip() for part in reporters.split(",")):
        if not name:
            continue
        spec = lookup_reporter(name)
        if spec is None:
            log.debug("Ignoring unknown reporter", reporter=name)
            continue
        if isinstance(spec, BareReporter):
            include_runner = False
            formatted.append(_arg("reporters", spec.name))
            continue
        ensure_output_dirs(spec, cwd)
        formatted.append(_arg("reporters", {"name": name, "options": reporter_options(spec)}))

    if formatted and include_runner:
        formatted.insert(0, _arg("reporters", DEFAULT_REPORTER))
    return formatted


def capabilities_argument(child_config: str | None, project_name: str) -> str:
    capabilities = {"name": project_name, "project": project_name}
    capabilities.update(PROVIDER_CAPABILITIES.get(child_config or "", {}))
    return _arg("capabilities", capabilities)


def build_arguments(
    config: TestRunConfig,
    *,
    package_root: Path | None = None,
    project_name: str | None = None,
    cwd: Path | None = None,
) -> list[str]:
    """
    Builds the ordered `key=value` argument list for a test run.

    Args:
        config: The test run options.
        package_root: Directory holding the `intern/` config folder. Defaults
            to the project root found from `cwd`.
        project_name: Name reported in remote capabilities. Defaults to the
            name of the project at `package_root`.
        cwd: Directory the runner will be launched from. Defaults to the
            current working directory.

    Raises:
        ConfigurationError: If externals are configured without a child config.
    """
    validate_config(config)

    working_dir = Path(cwd) if cwd is not None else Path.cwd()
    root = Path(package_root) if package_root is not None else find_project_root(working_dir)
    name = project_name if project_name is not None else get_project_name(root)

    args = [config_argument(config, root, working_dir)]

    # All suites run by default in the Intern config; switch off what was not asked for.
    if not config.remote_unit and not config.node_unit:
        args.append("suites=")

    if config.externals is not None:
        args.append(
            _arg("loader", {"script": EXTERNALS_LOADER_SCRIPT, "options": config.externals.to_json()})
        )

    if not config.remote_unit and not config.remote_functional:
        args.append("environments=")
    elif not config.remote_functional:
        args.append("functionalSuites=")

    if config.filter:
        args.append(_arg("grep", config.filter))

    if config.reporters:
        args.extend(reporter_arguments(config.reporters, working_dir))

    if config.user_name and config.testing_key:
        args.append(_arg("tunnelOptions", {"username": config.user_name, "accessKey": config.testing_key}))

    args.append(capabilities_argument(config.child_config, name))

    log.debug("Built runner arguments", count=len(args), emoji_key="args")
    return args


# 🔼⚙️
