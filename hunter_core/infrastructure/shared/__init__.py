"""
Shared infrastructure utilities.
"""

from .error_handling import (
    ErrorContext,
    ErrorHandler,
    ErrorHandlingService,
    ErrorInfo,
    ErrorSeverity,
    LoggingErrorHandler,
    safe_execute,
)

__all__ = [
    'ErrorContext',
    'ErrorHandler',
    'ErrorHandlingService',
    'ErrorInfo',
    'ErrorSeverity',
    'LoggingErrorHandler',
    'safe_execute',
]
