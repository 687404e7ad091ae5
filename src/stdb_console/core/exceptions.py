"""Exception hierarchy for stdb-console.

All exceptions carry an exit_code for CLI return value mapping.
Exit codes are defined in exit_codes.py.
"""

from stdb_console.core.exit_codes import ExitCode


class StdbConsoleError(Exception):
    """Base exception for all stdb-console errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NetworkError(StdbConsoleError):
    """Connection refused, unreachable host, broken transport."""

    exit_code: int = ExitCode.NETWORK_ERROR


class TimeoutError(NetworkError):
    """Request did not complete within the configured timeout."""

    exit_code: int = ExitCode.TIMEOUT


class InputError(StdbConsoleError):
    """File not found, invalid parameters."""

    exit_code: int = ExitCode.INPUT_ERROR


class ConfigError(StdbConsoleError):
    """Malformed config, missing profile, no usable endpoint."""

    exit_code: int = ExitCode.CONFIG_ERROR


class ApiError(StdbConsoleError):
    """The remote service rejected a request."""

    exit_code: int = ExitCode.API_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
