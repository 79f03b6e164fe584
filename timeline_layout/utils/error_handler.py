"""
Error Handler Utility
=====================

Exception types for the timeline layout package, plus the logging setup
used by applications embedding it.

Author: Timeline Layout Team
Version: 1.0
"""

import logging
import sys
from typing import Optional

# Configure logger
logger = logging.getLogger(__name__)

PACKAGE_LOGGER = 'timeline_layout'


class ErrorSeverity:
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class TimelineError(Exception):
    """Base exception for timeline layout errors."""

    def __init__(self, message: str, details: Optional[str] = None,
                 severity: str = ErrorSeverity.ERROR):
        """
        Initialize timeline error.

        Args:
            message: User-friendly error message
            details: Technical details for logging
            severity: Error severity level
        """
        super().__init__(message)
        self.message = message
        self.details = details or message
        self.severity = severity


class LayoutRequestError(TimelineError):
    """Exception for malformed or unsupported layout messages."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        """
        Initialize request error.

        Args:
            message: User-friendly error message
            field_name: Payload field that could not be read (if applicable)
            original_error: Original exception that was caught
        """
        details = f"{message}\n"
        if field_name:
            details += f"Field: {field_name}\n"
        if original_error:
            details += f"Original error: {str(original_error)}\n"

        super().__init__(message, details, ErrorSeverity.ERROR)
        self.field_name = field_name
        self.original_error = original_error


class LayoutComputationError(TimelineError):
    """Exception for failures inside a background layout computation."""

    def __init__(self, request_id: Optional[int], original_error: Exception):
        message = f"Layout computation failed for request {request_id}"
        details = f"{message}\n{type(original_error).__name__}: {str(original_error)}\n"
        super().__init__(message, details, ErrorSeverity.ERROR)
        self.request_id = request_id
        self.original_error = original_error


def setup_logging(log_level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional file to write logs to

    Returns:
        logging.Logger: The configured package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    # Clear any existing handlers
    package_logger.handlers = []
    package_logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger


def log_error(error: Exception, context: str = "") -> str:
    """
    Log an error at the level matching its severity.

    Args:
        error: The exception that occurred
        context: Context description (e.g., "computing layout")

    Returns:
        str: Severity that was used
    """
    if isinstance(error, TimelineError):
        details = error.details
        severity = error.severity
    else:
        details = f"{type(error).__name__}: {str(error)}"
        severity = ErrorSeverity.ERROR

    log_message = f"Error in {context}: {details}" if context else f"Error: {details}"

    if severity == ErrorSeverity.CRITICAL:
        logger.critical(log_message)
    elif severity == ErrorSeverity.ERROR:
        logger.error(log_message)
    elif severity == ErrorSeverity.WARNING:
        logger.warning(log_message)
    else:
        logger.info(log_message)

    return severity
