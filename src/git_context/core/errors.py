from __future__ import annotations


class GitContextError(Exception):
    """Base error for the project."""


class ValidationError(GitContextError, ValueError):
    """Raised before any git process is spawned."""

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(message)
        self.rule = rule


class InvalidRootError(GitContextError):
    pass


class ExecutionError(GitContextError):
    """git could not be started, or exited non-zero. Message is already sanitized."""

    def __init__(self, message: str, exit_code: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr
