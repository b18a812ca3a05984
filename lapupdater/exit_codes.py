"""
Standard exit codes for lapupdater commands.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
NETWORK_ERROR = 68       # Network connection failed
DATA_ERROR = 70          # Data format or validation error
PRECONDITION_ERROR = 72  # Source file or repository root missing/invalid
COPY_ERROR = 73          # Copying the lap-time file failed
PUBLISH_FAILED = 74      # add/commit/push sequence ended in failure
BUSY_ERROR = 75          # Another check/publish is already running
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class PreconditionError(CommandError):
    """Raised when the source file or repository root is missing or invalid."""
    def __init__(self, message: str, title: str = "Missing file"):
        super().__init__(message, PRECONDITION_ERROR)
        self.title = title


class ConnectivityError(CommandError):
    """Raised when the network reachability pre-check fails."""
    def __init__(self, message: str = "No Internet Connection"):
        super().__init__(message, NETWORK_ERROR)


class CopyError(CommandError):
    """Raised when the lap-time file cannot be copied into the repository."""
    def __init__(self, message: str):
        super().__init__(message, COPY_ERROR)


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class PublishFailedError(CommandError):
    """Raised when a publish sequence ends in failure."""
    def __init__(self, message: str = "An error occurred!"):
        super().__init__(message, PUBLISH_FAILED)


class WorkflowBusyError(CommandError):
    """Raised when a check or publish is requested while another is running."""
    def __init__(self, message: str = "Another operation is already running"):
        super().__init__(message, BUSY_ERROR)
