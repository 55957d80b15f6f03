"""
Enhanced logging infrastructure for hunter-core.

Logs to stderr and, optionally, to a timestamped file for troubleshooting.
"""

from .enhanced_logging import EnhancedLogger, enhanced_logger

__all__ = [
    'EnhancedLogger',
    'enhanced_logger'
]
