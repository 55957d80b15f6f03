"""
Infrastructure layer for hunter-core.

This module contains technical concerns like parsing, value normalization,
error handling and logging.
"""

from .parsers import NativeDumpParser
from .logging import enhanced_logger
from .shared import ErrorHandlingService

__all__ = [
    'NativeDumpParser',
    'enhanced_logger',
    'ErrorHandlingService',
]
