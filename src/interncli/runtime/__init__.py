#
# src/interncli/runtime/__init__.py
#
"""
Process supervision for test runs.
"""
from .protocols import RunFailed, RunOutcome, RunSuccess, RunSupervisor
from .supervisor import ProcessSupervisor, run_tests

__all__ = [
    "ProcessSupervisor",
    "RunFailed",
    "RunOutcome",
    "RunSuccess",
    "RunSupervisor",
    "run_tests",
]

# 🔼⚙️
