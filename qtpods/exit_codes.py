"""
Standard exit codes for qtpods commands.

Following Unix/POSIX conventions for command-line tools.
"""

from .domain.operation import FailureKind, OperationResult

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOT_A_REPOSITORY = 64    # Target directory is not a git repository
COMMAND_FAILED = 65      # An external git command exited non-zero
PERMISSION_ERROR = 67    # Insufficient permissions / unwritable file
NETWORK_ERROR = 68       # Network connection failed
DATA_ERROR = 70          # Data format or validation error
PARTIAL_SUCCESS = 71     # Some pods succeeded, some failed
INVALID_POD = 72         # Pod failed the layout check
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

FAILURE_EXIT_CODES = {
    FailureKind.PRECONDITION: NOT_A_REPOSITORY,
    FailureKind.COMMAND: COMMAND_FAILED,
    FailureKind.PARSE: DATA_ERROR,
    FailureKind.FILESYSTEM: PERMISSION_ERROR,
}

# Exit code mappings for filesystem and network errors reaching the CLI
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)


def exit_code_for_result(result: OperationResult) -> int:
    """
    Get the exit code that reports an operation result.

    A batch where some pods succeeded and others failed exits with
    PARTIAL_SUCCESS; otherwise the failure kind decides.
    """
    if result.success:
        return SUCCESS
    if result.failure is None and result.successful and result.failed:
        return PARTIAL_SUCCESS
    kind = result.failure_kind()
    return FAILURE_EXIT_CODES.get(kind, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class NotARepositoryError(CommandError):
    """Raised when the target directory is not a git repository."""
    def __init__(self, repository: str):
        super().__init__(f"{repository} is not a git repository", NOT_A_REPOSITORY)
        self.repository = repository


class PodNotFoundError(CommandError):
    """Raised when a pod name cannot be resolved in any catalog source."""
    def __init__(self, name: str):
        super().__init__(f"Pod '{name}' not found in any catalog source", DATA_ERROR)
        self.name = name
