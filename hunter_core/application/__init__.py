"""
Application layer for hunter-core.

This module contains the use cases driven by the command line.
"""

from .analyze_device import AnalyzeDeviceUseCase

__all__ = [
    'AnalyzeDeviceUseCase'
]
