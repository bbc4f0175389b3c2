#
# src/interncli/__init__.py
#
"""
interncli: build Intern arguments from test run options and supervise the run.
"""
from interncli.arguments import build_arguments
from interncli.config import TestRunConfig, load_config
from interncli.exceptions import ConfigurationError, InternCliError, LaunchError, RunFailure
from interncli.output import set_logger
from interncli.runtime import ProcessSupervisor, RunFailed, RunOutcome, RunSuccess, run_tests

__all__ = [
    "ConfigurationError",
    "InternCliError",
    "LaunchError",
    "ProcessSupervisor",
    "RunFailed",
    "RunFailure",
    "RunOutcome",
    "RunSuccess",
    "TestRunConfig",
    "build_arguments",
    "load_config",
    "run_tests",
    "set_logger",
]

# 🔼⚙️
