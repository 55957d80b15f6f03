"""
Emulator and virtual device detection.
"""

from .emulator_detection import EmulatorDetector

__all__ = ['EmulatorDetector']
