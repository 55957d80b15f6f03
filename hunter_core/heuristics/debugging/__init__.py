"""
Debug instrumentation detection.
"""

from .debug_detection import DebugDetector

__all__ = ['DebugDetector']
