"""
Shared error handling utilities.

Every pipeline stage contains its own failures: a category that cannot be
built is omitted, a detector that raises counts as not fired, and a dump
that cannot be analysed at all produces a degraded result. This module
gives those stages one way to record and log what went wrong.

Services are created per analysis call so error statistics never leak
between concurrent analyses.
"""

import logging
import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, TypeVar

T = TypeVar('T')


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Context information for error handling."""
    operation: str
    component: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorInfo:
    """Information about an error that occurred."""
    severity: ErrorSeverity
    message: str
    exception: Optional[Exception]
    context: ErrorContext
    stack_trace: Optional[str] = None

    def __post_init__(self):
        if self.exception is not None and not self.stack_trace:
            self.stack_trace = ''.join(traceback.format_exception(
                type(self.exception), self.exception, self.exception.__traceback__
            ))


class ErrorHandler(ABC):
    """Abstract base class for error handlers."""

    @abstractmethod
    def can_handle(self, error_info: ErrorInfo) -> bool:
        """Check if this handler can handle the given error."""
        pass

    @abstractmethod
    def handle(self, error_info: ErrorInfo) -> None:
        """Handle the error."""
        pass


class LoggingErrorHandler(ErrorHandler):
    """Error handler that logs errors."""

    def __init__(self, logger_name: str = "error.handler"):
        self.logger = logging.getLogger(logger_name)

    def can_handle(self, error_info: ErrorInfo) -> bool:
        return True

    def handle(self, error_info: ErrorInfo) -> None:
        """Log the error with appropriate severity."""
        log_message = f"[{error_info.context.component}] {error_info.context.operation}: {error_info.message}"

        if error_info.context.metadata:
            log_message += f" | Metadata: {error_info.context.metadata}"

        exc_info = error_info.exception if error_info.exception is not None else None

        if error_info.severity == ErrorSeverity.DEBUG:
            self.logger.debug(log_message)
        elif error_info.severity == ErrorSeverity.INFO:
            self.logger.info(log_message)
        elif error_info.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_message, exc_info=exc_info)
        elif error_info.severity == ErrorSeverity.ERROR:
            self.logger.error(log_message, exc_info=exc_info)
        else:
            self.logger.critical(log_message, exc_info=exc_info)


class ErrorHandlingService:
    """
    Records contained failures for one analysis.

    Handlers are notified in registration order; a failing handler is
    logged and skipped.
    """

    def __init__(self, handlers: Optional[List[ErrorHandler]] = None):
        self.handlers: List[ErrorHandler] = list(handlers) if handlers else [LoggingErrorHandler()]
        self.errors: List[ErrorInfo] = []
        self.error_stats: Dict[str, int] = {}
        self.logger = logging.getLogger("error.handling.service")

    def handle_error(self, error_info: ErrorInfo) -> None:
        """
        Record an error and pass it to registered handlers.

        Args:
            error_info: Information about the error
        """
        error_key = f"{error_info.context.component}_{error_info.severity.value}"
        self.error_stats[error_key] = self.error_stats.get(error_key, 0) + 1
        self.errors.append(error_info)

        for handler in self.handlers:
            if not handler.can_handle(error_info):
                continue
            try:
                handler.handle(error_info)
            except Exception as handler_error:
                self.logger.error(f"Error handler {type(handler).__name__} failed: {handler_error}")

    def record(self,
               exception: Exception,
               operation: str,
               component: str,
               severity: ErrorSeverity = ErrorSeverity.WARNING,
               **metadata) -> ErrorInfo:
        """Build an ErrorInfo for an exception and handle it."""
        error_info = ErrorInfo(
            severity=severity,
            message=str(exception) or type(exception).__name__,
            exception=exception,
            context=self.create_error_context(operation, component, **metadata)
        )
        self.handle_error(error_info)
        return error_info

    def create_error_context(self, operation: str, component: str, **metadata) -> ErrorContext:
        """Create an error context for consistent error reporting."""
        return ErrorContext(
            operation=operation,
            component=component,
            metadata=metadata
        )

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def get_error_stats(self) -> Dict[str, int]:
        return self.error_stats.copy()


def safe_execute(func: Callable[[], T],
                 default_value: T = None,
                 operation: str = "unknown_operation",
                 component: str = "unknown_component",
                 service: Optional[ErrorHandlingService] = None) -> T:
    """
    Safely execute a function with error handling.

    Args:
        func: Function to execute
        default_value: Value to return if function fails
        operation: Name of the operation for error context
        component: Name of the component for error context
        service: Service that records the failure (a private one if omitted)

    Returns:
        Function result or default value if error occurred
    """
    try:
        return func()
    except Exception as e:
        (service or ErrorHandlingService()).record(e, operation, component)
        return default_value
