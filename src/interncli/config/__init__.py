#
# config/__init__.py
#
"""
Configuration handling sub-package for interncli.

Exports the loading function and the test run models.
"""

from .loader import config_from_mapping, load_config
from .models import (
    Dependency,
    ExternalDependency,
    ExternalsConfig,
    TestRunConfig,
)

__all__ = [
    "Dependency",
    "ExternalDependency",
    "ExternalsConfig",
    "TestRunConfig",
    "config_from_mapping",
    "load_config",
]

# 🔼⚙️
