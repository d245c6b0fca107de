"""
Error handling utilities for codex.

This module provides the exception taxonomy used throughout the tool and a
helper for logging errors with their context. Every error is terminal for the
current subcommand: there is no retry and no partial-result salvage.

Classes:
    CodexError: Base exception for all codex errors.
    ConfigReadError: Missing, unreadable or malformed codex.yml.
    ConfigWriteError: Config destination could not be written.
    OutputCreateError: Output artifact could not be created.
    TraversalError: Filesystem access failure during the directory walk.
    UsageError: Missing or invalid command-line arguments.

Functions:
    log_error_with_context: Log an error and its underlying cause.
"""

import logging
import traceback
from typing import Any, Dict, Optional


class CodexError(Exception):
    """
    Base exception for codex errors.

    Attributes:
        message: Error message describing what went wrong.
        path: Optional filesystem path involved in the failure.
        original_error: Optional underlying exception that was wrapped.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize CodexError.

        Args:
            message: Error message describing the issue.
            path: Optional path the operation was working on.
            original_error: Optional underlying exception that caused this error.
        """
        self.message = message
        self.path = path
        self.original_error = original_error
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dictionary containing error_type, message, path and original
            error information if available.
        """
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "path": self.path,
        }

        if self.original_error:
            result["original_error_type"] = type(self.original_error).__name__
            result["original_error_message"] = str(self.original_error)

        return result


class ConfigReadError(CodexError):
    """Exception for a config file that is missing, unreadable or malformed."""


class ConfigWriteError(CodexError):
    """Exception for a config file that cannot be written."""


class OutputCreateError(CodexError):
    """Exception for an output artifact that cannot be created."""


class TraversalError(CodexError):
    """
    Exception for filesystem failures while walking the source tree.

    Attributes:
        operation: Optional name of the filesystem operation that failed
            (stat, list, read).
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message=message, path=path, original_error=original_error)
        self.operation = operation

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary including the failed operation.

        Returns:
            Dictionary with all base fields plus operation.
        """
        result = super().to_dict()
        result["operation"] = self.operation
        return result


class UsageError(CodexError):
    """Exception for missing or invalid command-line arguments."""


def log_error_with_context(
    error: Exception, logger: logging.Logger, context: str
) -> None:
    """
    Log an error together with the operation it interrupted.

    In DEBUG mode the error details and the stack trace are logged as well.

    Args:
        error: The exception that occurred.
        logger: Logger instance to use for logging.
        context: Description of the operation that failed.
    """
    logger.error(f"{context}: {error}")

    if logger.isEnabledFor(logging.DEBUG):
        if isinstance(error, CodexError):
            logger.debug(f"Error details: {error.to_dict()}")

        logger.debug("Stack trace:")
        logger.debug(traceback.format_exc())
