# src/interncli/cli/run_cmds.py

import asyncio
from pathlib import Path

import click
import structlog

from interncli.arguments import build_arguments
from interncli.cli.utils import (
    config_path_option,
    logging_options,
    resolve_test_config,
    run_options,
    setup_logging_from_context,
)
from interncli.exceptions import ConfigurationError
from interncli.runtime import ProcessSupervisor
from interncli.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")


@click.command(name="run")
@config_path_option
@run_options
@click.option(
    "--runner",
    "runner_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="INTERNCLI_RUNNER",
    help="Path to the intern executable (env var INTERNCLI_RUNNER).",
)
@click.option(
    "--watcher",
    "watcher_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="INTERNCLI_WATCHER",
    help="Path to the nodemon executable used by --watch (env var INTERNCLI_WATCHER).",
)
@logging_options
@click.pass_context
def run_cli(
    ctx: click.Context,
    config_path: Path | None,
    runner_path: Path | None,
    watcher_path: Path | None,
    **kwargs,
):
    """Run the project's Intern tests."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.pop("log_level", None),
        local_log_file=kwargs.pop("log_file", None),
        local_json_logs=kwargs.pop("json_logs", None),
    )

    try:
        config = resolve_test_config(config_path, **kwargs)
    except ConfigurationError as e:
        log.error("Failed to load test configuration", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    supervisor = ProcessSupervisor(runner_path=runner_path, watcher_path=watcher_path)
    try:
        outcome = asyncio.run(supervisor.run(config))
    except KeyboardInterrupt:
        log.warning("Test run interrupted by KeyboardInterrupt (CTRL-C).")
        ctx.exit(130)

    if not outcome.success:
        click.echo(f"Error: {outcome.message}", err=True)
        ctx.exit(outcome.exit_code)


@click.command(name="args")
@config_path_option
@run_options
@logging_options
@click.pass_context
def args_cli(ctx: click.Context, config_path: Path | None, **kwargs):
    """Print the arguments that would be passed to Intern, one per line."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.pop("log_level", None),
        local_log_file=kwargs.pop("log_file", None),
        local_json_logs=kwargs.pop("json_logs", None),
    )

    try:
        config = resolve_test_config(config_path, **kwargs)
        arguments = build_arguments(config)
    except ConfigurationError as e:
        log.error("Cannot build arguments", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    for argument in arguments:
        click.echo(argument)

# 🔼⚙️
