"""
Detector registry and configuration.

This module provides the central registry for all detector implementations.
Detectors run in the order listed here, which is also the order of their
lines in the risk report.
"""

from .base import BaseDetector, DetectorRegistry
from .emulator.emulator_detection import EmulatorDetector
from .integrity.root_detection import RootDetector
from .debugging.debug_detection import DebugDetector
from .injection.injection_detection import InjectionDetector
from .injection.risk_tag_analysis import RiskTagDetector


# Registry of all available detectors
DETECTORS = [
    EmulatorDetector,
    RootDetector,
    DebugDetector,
    InjectionDetector,
    RiskTagDetector,
]

# Detector categories for organization
DETECTOR_CATEGORIES = {
    "Emulation": [
        EmulatorDetector,
    ],
    "Integrity": [
        RootDetector,
    ],
    "Debugging": [
        DebugDetector,
    ],
    "Injection": [
        InjectionDetector,
        RiskTagDetector,
    ],
}


def get_detector_by_name(name: str):
    """Get a detector class by name."""
    for detector in DETECTORS:
        if detector().name == name:
            return detector
    return None


def get_detectors_by_category(category: str):
    """Get all detectors in a specific category."""
    return DETECTOR_CATEGORIES.get(category, [])


def create_registry() -> DetectorRegistry:
    """Registry holding every built-in detector."""
    registry = DetectorRegistry()
    for detector in DETECTORS:
        registry.register(detector)
    return registry


__all__ = [
    'BaseDetector',
    'DetectorRegistry',
    'DETECTORS',
    'DETECTOR_CATEGORIES',
    'EmulatorDetector',
    'RootDetector',
    'DebugDetector',
    'InjectionDetector',
    'RiskTagDetector',
    'get_detector_by_name',
    'get_detectors_by_category',
    'create_registry',
]
