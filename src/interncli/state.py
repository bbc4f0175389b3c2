# src/interncli/state.py
#
"""
State tracking for a single supervised test run.
"""

from enum import Enum, auto

import structlog
from attrs import field, mutable

from interncli.exceptions import InvalidStateTransition

log: structlog.stdlib.BoundLogger = structlog.get_logger("state")


class RunStatus(Enum):
    """Lifecycle of one runner invocation."""

    IDLE = auto()
    LAUNCHING = auto()  # Arguments built, process being spawned.
    RUNNING = auto()  # Process started, waiting for it to exit.
    SUCCEEDED = auto()
    FAILED = auto()


TERMINAL_STATUSES = frozenset({RunStatus.SUCCEEDED, RunStatus.FAILED})

ALLOWED_TRANSITIONS: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.IDLE: frozenset({RunStatus.LAUNCHING, RunStatus.FAILED}),
    RunStatus.LAUNCHING: frozenset({RunStatus.RUNNING, RunStatus.FAILED}),
    RunStatus.RUNNING: frozenset({RunStatus.SUCCEEDED, RunStatus.FAILED}),
    RunStatus.SUCCEEDED: frozenset(),
    RunStatus.FAILED: frozenset(),
}

STATUS_EMOJI_MAP = {
    RunStatus.IDLE: "⏸️",
    RunStatus.LAUNCHING: "🚀",
    RunStatus.RUNNING: "🔄",
    RunStatus.SUCCEEDED: "✅",
    RunStatus.FAILED: "❌",
}


@mutable(slots=True)
class RunState:
    """Mutable status holder for one run. Terminal statuses are final."""

    run_id: str = field()
    status: RunStatus = field(default=RunStatus.IDLE)
    error_message: str | None = field(default=None)
    returncode: int | None = field(default=None)

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def display_status_emoji(self) -> str:
        return STATUS_EMOJI_MAP[self.status]

    def update_status(self, new_status: RunStatus, error_msg: str | None = None) -> None:
        old_status = self.status
        if new_status not in ALLOWED_TRANSITIONS[old_status]:
            raise InvalidStateTransition(
                f"Cannot move run '{self.run_id}' from {old_status.name} to {new_status.name}"
            )
        self.status = new_status
        if error_msg is not None:
            self.error_message = error_msg
        log.debug(
            "Run status changed",
            run_id=self.run_id,
            old_status=old_status.name,
            new_status=new_status.name,
            emoji=self.display_status_emoji,
        )


# 🔼⚙️
