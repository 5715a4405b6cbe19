"""
Standard exit codes for depvalidator commands.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination, every repository valid
VALIDATION_FAILED = 1    # At least one repository is not a valid component
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_REPOS_FOUND = 64      # No repositories to validate
CONFIG_ERROR = 66        # Configuration file error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': GENERAL_ERROR,
    'UnicodeDecodeError': GENERAL_ERROR,
    'ValueError': GENERAL_ERROR,
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
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class NoReposFoundError(CommandError):
    """Raised when there are no repositories to validate."""
    def __init__(self, message: str = "No repositories to validate"):
        super().__init__(message, NO_REPOS_FOUND)


class UsageError(CommandError):
    """Raised when the command is invoked without the required input."""
    def __init__(self, message: str):
        super().__init__(message, USAGE_ERROR)


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)
