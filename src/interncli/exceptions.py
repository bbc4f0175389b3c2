# src/interncli/exceptions.py

"""
Custom exceptions for interncli.
"""


class InternCliError(Exception):
    """Base class for all interncli errors."""

    def __init__(self, message: str, exit_code: int = 1):
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ConfigurationError(InternCliError):
    """Raised when a test run configuration is invalid or cannot be loaded."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        full_message = message
        if path:
            full_message += f" (Config: '{path}')"
        super().__init__(full_message)


class LaunchError(InternCliError):
    """Raised when the runner or watcher process could not be started."""

    def __init__(self, message: str, executable: str | None = None, details: Exception | None = None):
        self.executable = executable
        self.details = details
        super().__init__(message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class RunFailure(InternCliError):
    """Raised when the runner process started but exited with a nonzero code."""

    def __init__(self, message: str, returncode: int | None = None):
        # The process exit code is kept for logging only; callers always see 1.
        self.returncode = returncode
        super().__init__(message)


class InvalidStateTransition(InternCliError):
    """Raised when a run is moved out of a terminal state."""

    pass


# 🔼⚙️
