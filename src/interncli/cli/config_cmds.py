# src/interncli/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from interncli.cli.utils import logging_options, setup_logging_from_context
from interncli.config import load_config
from interncli.exceptions import ConfigurationError
from interncli.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
    required=True,
    envvar="INTERNCLI_CONF",
    help="Path to the TOML configuration file (env var INTERNCLI_CONF).",
    show_envvar=True,
)
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path, **kwargs):
    """Load, validate, and display the configuration."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    log.info("Executing 'config show' command", config_path=str(config_path))

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: Configuration problem in '{config_path}':\n{e}", err=True)
        ctx.exit(1)

    click.echo(pretty_repr(config, expand_all=True))

    if config.externals is not None and not config.child_config:
        log.warning("Externals are configured without a child config; test runs will fail.")
        click.echo("Warning: 'externals' requires 'child_config' to be set.", err=True)

# 🔼⚙️
