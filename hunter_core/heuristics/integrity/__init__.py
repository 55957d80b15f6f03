"""
Boot chain and platform integrity detection.
"""

from .root_detection import RootDetector

__all__ = ['RootDetector']
