# src/interncli/cli/utils.py

import logging
from pathlib import Path
from typing import Any

import attrs
import click
import structlog

from interncli.config import TestRunConfig, load_config
from interncli.telemetry.logger import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)

# CLI option name -> TestRunConfig field, for the flag-style options.
BOOLEAN_OPTIONS = ("node_unit", "remote_unit", "remote_functional", "watch", "verbose")
STRING_OPTIONS = (
    "child_config",
    "intern_config",
    "reporters",
    "user_name",
    "secret",
    "testing_key",
    "filter",
)


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="INTERNCLI_LOG_LEVEL",
        help="Set the logging level.",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="INTERNCLI_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="INTERNCLI_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def config_path_option(f):
    return click.option(
        "-c",
        "--config-path",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
        default=None,
        envvar="INTERNCLI_CONF",
        help="Path to a TOML file with test run options (env var INTERNCLI_CONF).",
        show_envvar=True,
    )(f)


def run_options(f):
    """Decorator adding one option per TestRunConfig field."""
    options = [
        click.option("-u", "--node-unit/--no-node-unit", default=None, help="Run unit tests in Node."),
        click.option("-r", "--remote-unit/--no-remote-unit", default=None, help="Run unit tests in remote browsers."),
        click.option(
            "-f", "--remote-functional/--no-remote-functional", default=None, help="Run functional tests."
        ),
        click.option("-w", "--watch/--no-watch", default=None, help="Re-run tests when sources change."),
        click.option("-v", "--verbose/--no-verbose", default=None, help="Show the resolved Intern config."),
        click.option("--child-config", default=None, help="Child config to use, e.g. 'browserstack'."),
        click.option("--intern-config", default=None, help="Intern config file inside intern/."),
        click.option("--reporters", default=None, help="Comma-separated list of reporters."),
        click.option("--user-name", default=None, help="Remote testing service user name."),
        click.option("--secret", default=None, help="Remote testing service secret."),
        click.option("--testing-key", default=None, help="Remote testing service access key."),
        click.option("--filter", "-g", "filter", default=None, help="Only run tests matching this pattern."),
        click.option(
            "--loader-plugin",
            "loader_plugins",
            multiple=True,
            help="Loader plugin to register (repeatable).",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def resolve_test_config(config_path: Path | None, **cli_values: Any) -> TestRunConfig:
    """
    Merges CLI values over the optional config file.

    Only options given on the command line override the file.
    """
    base = load_config(config_path) if config_path else TestRunConfig()
    overrides: dict[str, Any] = {}
    for name in (*BOOLEAN_OPTIONS, *STRING_OPTIONS):
        value = cli_values.get(name)
        if value is not None:
            overrides[name] = value
    if cli_values.get("loader_plugins"):
        overrides["loader_plugins"] = cli_values["loader_plugins"]
    return attrs.evolve(base, **overrides)


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "WARNING",
) -> None:
    """
    Setup logging using context values, allowing local overrides.
    """
    obj = ctx.obj or {}
    log_level_str = local_log_level or obj.get("LOG_LEVEL") or default_log_level
    log_file_path = local_log_file or obj.get("LOG_FILE")
    use_json_logs = local_json_logs if local_json_logs is not None else obj.get("JSON_LOGS", False)

    numeric_level = logging.getLevelName(log_level_str.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level_str = "INFO"

    core_setup_logging(
        level=numeric_level,
        json_logs=use_json_logs,
        log_file=log_file_path,
    )

    log.debug(
        "CLI logging initialized via utils",
        level=log_level_str,
        file=log_file_path or "console",
        json=use_json_logs,
    )

# ⚙️🛠️
