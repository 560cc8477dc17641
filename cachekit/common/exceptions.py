"""
Common Exception Classes

This module defines the exceptions raised by cachekit. Normal cache
operations never raise; these cover misuse, configuration problems and the
I/O path of the file content cache.
"""

from typing import Optional, Any


class BaseError(Exception):
    """Base class for all custom exceptions."""

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            original_exception: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class CacheError(BaseError):
    """Exception raised for cache-related errors."""

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        """
        Initialize the cache error.

        Args:
            message: Error message
            original_exception: Original cache exception
        """
        super().__init__(f"Cache error: {message}", original_exception)


class FileCacheError(CacheError):
    """Exception raised when a file cannot be loaded into the file cache."""

    def __init__(self, message: str, path: Any, original_exception: Optional[Exception] = None):
        """
        Initialize the file cache error.

        Args:
            message: Error message
            path: Path of the file that failed to load
            original_exception: Underlying OS error, if any
        """
        super().__init__(f"{message}: {path}", original_exception)
        self.path = path


class CacheFileNotFoundError(FileCacheError):
    """Raised when the requested file does not exist."""

    def __init__(self, path: Any, original_exception: Optional[Exception] = None):
        super().__init__("File not found", path, original_exception)


class NotAFileError(FileCacheError):
    """Raised when the requested path exists but is not a regular file."""

    def __init__(self, path: Any):
        super().__init__("Not a file", path)


class FileTooLargeError(FileCacheError):
    """Raised when a file is larger than can be held in memory."""

    def __init__(self, path: Any, size: int):
        """
        Initialize the error.

        Args:
            path: Path of the oversized file
            size: Size of the file in bytes
        """
        super().__init__(f"File of {size} bytes is too large to load", path)
        self.size = size


class ConfigurationError(BaseError):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        """
        Initialize the configuration error.

        Args:
            message: Error message
            config_key: The configuration key that caused the error
        """
        super().__init__(f"Configuration error: {message}")
        self.config_key = config_key
