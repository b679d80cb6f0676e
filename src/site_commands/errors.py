"""Domain-specific exceptions for site-commands."""

from __future__ import annotations


class FatalCommandError(Exception):
    """Terminates the command attempt; the host reports it and exits non-zero."""

    exit_code: int = 1


class ValidationRejected(FatalCommandError):
    """The command's ``validate`` hook returned False."""

    def __init__(self, usage: str) -> None:
        self.usage = usage
        super().__init__(usage)


class UnauthorizedFlag(FatalCommandError):
    """A flag was passed to a command that does not allow it."""

    def __init__(self, flag: str, command: str) -> None:
        self.flag = flag
        self.command = command
        super().__init__(f"The --{flag} flag is not allowed for '{command}'")


class ConfigurationError(FatalCommandError):
    """Command configuration cannot be executed as given."""


class HandlerError(Exception):
    """Raised by command handlers for expected, user-facing failures.

    Not caught by the lifecycle; the host reports it after any
    in-flight site context has been restored.
    """
