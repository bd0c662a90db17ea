"""
Exception classes for depcache.
"""

from typing import Optional


class DepCacheError(Exception):
    """Base exception for all dependency cache errors."""

    pass


class ToolNotFoundError(DepCacheError):
    """Raised when the package manager command line tool is not installed."""

    def __init__(self, cli_name: str):
        self.cli_name = cli_name
        super().__init__(f"Command line tool {cli_name} not installed")


class CliVersionError(DepCacheError):
    """Raised when the package manager cannot report its version."""

    def __init__(self, cli_name: str, message: str = ""):
        self.cli_name = cli_name
        if message:
            super().__init__(f"Could not query {cli_name} version: {message}")
        else:
            super().__init__(f"Could not query {cli_name} version")


class InstallFailedError(DepCacheError):
    """Raised when the install command exits with a non-zero status."""

    def __init__(self, command: str, returncode: int):
        self.command = command
        self.returncode = returncode
        super().__init__(f"Error running {command} (exit code {returncode})")


class ArchiveFailedError(DepCacheError):
    """Raised when compressing or publishing a cache entry fails."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        if message:
            super().__init__(f"Error archiving {path}: {message}")
        else:
            super().__init__(f"Error archiving {path}")


class ConfigHashError(DepCacheError):
    """Raised when the package manager config file cannot be hashed."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        if message:
            super().__init__(f"Could not hash config file {path}: {message}")
        else:
            super().__init__(f"Could not hash config file {path}")


class ExtractFailedError(DepCacheError):
    """Raised when a cache entry cannot be extracted."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        if message:
            super().__init__(f"Error extracting {path}: {message}")
        else:
            super().__init__(f"Error extracting {path}")


class LockTimeoutError(DepCacheError):
    """Raised when a lock is not granted within the configured timeout."""

    def __init__(self, path: str, timeout: Optional[float] = None):
        self.path = path
        self.timeout = timeout
        if timeout is not None:
            super().__init__(
                f"Lock error for {path}: Timeout after {timeout} seconds"
            )
        else:
            super().__init__(f"Could not acquire lock for {path}")


class UnknownManagerError(DepCacheError):
    """Raised when a package manager name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown package manager: {name}")
