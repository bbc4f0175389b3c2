# src/interncli/cli/main.py

"""
Command-line entry point: `interncli run`, `interncli args`, `interncli config show`.
"""

from importlib.metadata import PackageNotFoundError, version

import click
import structlog

from interncli.cli.config_cmds import config_cli
from interncli.cli.run_cmds import args_cli, run_cli
from interncli.cli.utils import logging_options, setup_logging_from_context
from interncli.telemetry import StructLogger

try:
    __version__ = version("interncli")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

log: StructLogger = structlog.get_logger("cli.main")

EPILOG = """\b
Examples:
  interncli run --node-unit --reporters junit,pretty
  interncli run --remote-unit --child-config browserstack --user-name me --testing-key KEY
  interncli run --watch --node-unit
  interncli args -c interncli.toml

\b
Environment:
  INTERNCLI_CONF     options file used when --config-path is not given
  INTERNCLI_RUNNER   intern executable (default node_modules/.bin/intern)
  INTERNCLI_WATCHER  nodemon executable used by --watch
"""


@click.group(epilog=EPILOG, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="interncli")
@logging_options
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, json_logs: bool | None):
    """
    Run a project's Intern test suites.

    Options pick the suites: unit tests in Node, unit tests in remote
    browsers, or functional tests through a remote provider's child config.
    A run exits 0 when testing completed successfully and 1 otherwise.
    """
    ctx.obj = {
        "LOG_LEVEL": log_level,
        "LOG_FILE": log_file,
        "JSON_LOGS": bool(json_logs),
    }
    setup_logging_from_context(ctx)
    log.debug("interncli starting", version=__version__, subcommand=ctx.invoked_subcommand)


for command in (run_cli, args_cli, config_cli):
    cli.add_command(command)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
