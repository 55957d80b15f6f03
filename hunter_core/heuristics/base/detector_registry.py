"""
Detector registry.

Keeps track of the available detector classes and instantiates them with
their configuration.
"""

import logging
from typing import Dict, List, Optional, Type

from hunter_core.logic.models import AnalysisConfig, DetectorConfig
from .base_detector import BaseDetector


class DetectorRegistry:
    """Registry for managing detector classes, keyed by detector name."""

    def __init__(self):
        self._detectors: Dict[str, Type[BaseDetector]] = {}
        self.logger = logging.getLogger("detector.registry")

    def register(self, detector_class: Type[BaseDetector]) -> None:
        """
        Register a detector class.

        Args:
            detector_class: The detector class to register
        """
        if not issubclass(detector_class, BaseDetector):
            raise ValueError(f"Class {detector_class} must inherit from BaseDetector")

        name = detector_class().name
        if name in self._detectors:
            self.logger.warning(f"Detector {name} is already registered, overwriting")

        self._detectors[name] = detector_class
        self.logger.debug(f"Registered detector: {name}")

    def get_detector_class(self, name: str) -> Optional[Type[BaseDetector]]:
        return self._detectors.get(name)

    def get_available_detectors(self) -> List[str]:
        """Detector names in registration order."""
        return list(self._detectors.keys())

    def create_instance(self, name: str, config: Optional[DetectorConfig] = None) -> Optional[BaseDetector]:
        detector_class = self.get_detector_class(name)
        if detector_class is None:
            return None
        return detector_class(config)

    def create_instances(self, config: AnalysisConfig) -> List[BaseDetector]:
        """
        Create every registered detector with its configuration.

        Args:
            config: Analysis configuration holding per-detector settings

        Returns:
            Detector instances in registration order
        """
        instances = []
        for name in self._detectors:
            detector_config = config.detectors.get(name)
            instances.append(self.create_instance(name, detector_config))
        return instances
