# src/interncli/reporters.py

"""
Registry of the reporters the runner understands and where they write output.
"""

from pathlib import Path
from typing import TypeAlias

import structlog
from attrs import define, field

from interncli.telemetry import StructLogger

log: StructLogger = structlog.get_logger("reporters")

REPORTER_DIR = "output/coverage"


@define(frozen=True, slots=True)
class BareReporter:
    """A console reporter selected by name alone, with no options object."""

    name: str = field()


@define(frozen=True, slots=True)
class DirectoryReporter:
    """A file reporter writing into a directory, optionally under a fixed filename."""

    directory: str = field()
    filename: str | None = field(default=None)


@define(frozen=True, slots=True)
class FileReporter:
    """A file reporter writing to a single path; its parent directory must exist."""

    filename: str = field()


ReporterSpec: TypeAlias = BareReporter | DirectoryReporter | FileReporter

REPORTERS: dict[str, ReporterSpec] = {
    "benchmark": DirectoryReporter(f"{REPORTER_DIR}/benchmark", "coverage.xml"),
    "cobertura": DirectoryReporter(f"{REPORTER_DIR}/cobertura", "coverage.xml"),
    "htmlcoverage": DirectoryReporter(f"{REPORTER_DIR}/html"),
    "jsoncoverage": DirectoryReporter(f"{REPORTER_DIR}/json"),
    "junit": FileReporter(f"{REPORTER_DIR}/junit/coverage.xml"),
    "lcov": DirectoryReporter(f"{REPORTER_DIR}/lcov", "coverage.lcov"),
    "pretty": BareReporter("pretty"),
    "runner": BareReporter("runner"),
    "simple": BareReporter("simple"),
    "teamcity": BareReporter("teamcity"),
}


def lookup_reporter(name: str) -> ReporterSpec | None:
    """Case-insensitive lookup. Unknown names return None."""
    return REPORTERS.get(name.strip().lower())


def reporter_options(spec: DirectoryReporter | FileReporter) -> dict[str, str]:
    """Builds the options object the runner expects for a file reporter."""
    match spec:
        case DirectoryReporter(directory=directory, filename=None):
            return {"directory": directory}
        case DirectoryReporter(directory=directory, filename=filename):
            return {"directory": directory, "filename": filename}
        case FileReporter(filename=filename):
            return {"filename": filename}
    raise TypeError(f"Reporter spec has no options: {spec!r}")


def output_directory(spec: ReporterSpec) -> str | None:
    """Returns the directory a reporter writes into, or None for console reporters."""
    match spec:
        case DirectoryReporter(directory=directory):
            return directory
        case FileReporter(filename=filename):
            return str(Path(filename).parent)
    return None


def ensure_output_dirs(spec: ReporterSpec, base: Path | None = None) -> Path | None:
    """Creates the reporter's output directory if it does not exist yet."""
    directory = output_directory(spec)
    if directory is None:
        return None
    target = (base or Path.cwd()) / directory
    target.mkdir(parents=True, exist_ok=True)
    log.debug("Reporter output directory ready", directory=str(target), emoji_key="path")
    return target


# 🔼⚙️
