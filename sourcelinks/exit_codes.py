"""
Standard exit codes for sourcelinks commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
DATA_ERROR = 70          # Data format or validation error
REPO_NOT_FOUND = 72      # File has no owning repository
PROJECT_ERROR = 73       # Project registry construction or lookup failed
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'NotADirectoryError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'UnicodeDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    exit_code = getattr(exc, 'exit_code', None)
    if isinstance(exit_code, int):
        return exit_code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class MalformedPointerError(CommandError):
    """Raised when a repository's FETCH_HEAD is missing or unparseable."""
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, DATA_ERROR)
        self.path = path


class RepoNotFoundError(CommandError):
    """Raised when a file that must belong to a repository has no owner."""
    def __init__(self, message: str = "No git repository found", path: Optional[str] = None):
        super().__init__(message, REPO_NOT_FOUND)
        self.path = path


class DuplicateProjectError(CommandError):
    """Raised when two project files share the same project name."""
    def __init__(self, name: str, first_path: str, second_path: str):
        super().__init__(
            f"Duplicate project name '{name}': {first_path} and {second_path}",
            PROJECT_ERROR,
        )
        self.name = name
        self.paths = (first_path, second_path)


class ProjectLookupError(CommandError):
    """Raised when a project lookup does not yield exactly one project."""
    def __init__(self, name: str, matches: int = 0):
        if matches == 0:
            message = f"No project named '{name}'"
        else:
            message = f"Project name '{name}' is ambiguous ({matches} matches)"
        super().__init__(message, PROJECT_ERROR)
        self.name = name
        self.matches = matches
