"""
Configuration, error types and logging setup for the timeline layout.
"""

from .error_handler import (
    ErrorSeverity,
    LayoutComputationError,
    LayoutRequestError,
    TimelineError,
    setup_logging,
)
from .layout_config import LayoutConfig

__all__ = [
    'ErrorSeverity',
    'LayoutComputationError',
    'LayoutRequestError',
    'TimelineError',
    'LayoutConfig',
    'setup_logging',
]
