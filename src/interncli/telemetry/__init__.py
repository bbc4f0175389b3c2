# src/interncli/telemetry/__init__.py

"""
Logging and telemetry helpers for interncli.
"""

from structlog.typing import FilteringBoundLogger

StructLogger = FilteringBoundLogger

__all__ = ["StructLogger"]
