"""Standard exit codes for stdb-console.

Exit codes follow Unix conventions; 8 is reserved for errors reported
by the remote service itself.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for stdb-console commands."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    INPUT_ERROR = 3
    OUTPUT_ERROR = 4
    NETWORK_ERROR = 5
    TIMEOUT = 6
    CONFIG_ERROR = 7
    API_ERROR = 8
