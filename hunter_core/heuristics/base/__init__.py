"""
Base detector interfaces and utilities.
"""

from .base_detector import BaseDetector
from .detector_registry import DetectorRegistry

__all__ = [
    'BaseDetector',
    'DetectorRegistry',
]
