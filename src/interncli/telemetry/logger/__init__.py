# src/interncli/telemetry/logger/__init__.py

from .base import BASE_LOGGER_NAME, setup_logging

__all__ = ["BASE_LOGGER_NAME", "setup_logging"]
