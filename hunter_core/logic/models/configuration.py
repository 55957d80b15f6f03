"""
Configuration domain models.

Contains the data structures for managing detector weights, thresholds and
marker lists.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml


DEFAULT_DETECTOR_WEIGHTS = {
    "emulator": 40,
    "root": 30,
    "debug": 20,
    "injection": 50,
    "risk_tags": 10,
}


@dataclass
class DetectorConfig:
    """Configuration for a single detector."""
    name: str
    enabled: bool = True
    weight: int = 0
    parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate detector configuration."""
        if self.name not in DEFAULT_DETECTOR_WEIGHTS:
            raise ValueError(f"Unknown detector: {self.name}")

        if not isinstance(self.weight, int) or isinstance(self.weight, bool):
            raise ValueError(f"Weight must be an integer for {self.name}")

        if self.weight < 0:
            raise ValueError(f"Weight cannot be negative for {self.name}")

        if not isinstance(self.parameters, dict):
            raise ValueError(f"Parameters must be a mapping for {self.name}")

    def get_parameter(self, key: str, default: Any = None) -> Any:
        return self.parameters.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'weight': self.weight,
            'parameters': dict(self.parameters),
        }


@dataclass
class ScoringConfig:
    """Configuration for the native risk score."""
    max_score: int = 100

    def __post_init__(self):
        if not isinstance(self.max_score, int) or isinstance(self.max_score, bool):
            raise ValueError("max_score must be an integer")
        if not 0 < self.max_score <= 100:
            raise ValueError("max_score must be between 1 and 100")


@dataclass
class AnalysisConfig:
    """
    Main configuration for the analysis pipeline.

    Keeps detector weights and marker lists out of the detector code.
    """

    detectors: Dict[str, DetectorConfig] = field(default_factory=dict)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)

    def __post_init__(self):
        """Fill in defaults for detectors that were not configured."""
        for name, weight in DEFAULT_DETECTOR_WEIGHTS.items():
            if name not in self.detectors:
                self.detectors[name] = DetectorConfig(name=name, weight=weight)

    def get_detector_config(self, name: str) -> DetectorConfig:
        return self.detectors[name]

    def get_enabled_detectors(self) -> List[str]:
        """Get list of enabled detector names."""
        return [name for name, config in self.detectors.items() if config.enabled]

    @classmethod
    def from_file(cls, file_path: str) -> 'AnalysisConfig':
        """Load configuration from a file (JSON or YAML)."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() in ['.yml', '.yaml']:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalysisConfig':
        """Create configuration from dictionary."""
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a mapping")

        detectors_data = data.get('detectors') or {}
        if not isinstance(detectors_data, dict):
            raise ValueError("'detectors' must be a mapping of detector names")

        detectors = {}
        for name, config_data in detectors_data.items():
            config_data = config_data or {}
            if not isinstance(config_data, dict):
                raise ValueError(f"Configuration of detector '{name}' must be a mapping")
            detectors[name] = DetectorConfig(
                name=name,
                enabled=config_data.get('enabled', True),
                weight=config_data.get('weight', DEFAULT_DETECTOR_WEIGHTS.get(name, 0)),
                parameters=config_data.get('parameters') or {}
            )

        scoring_data = data.get('scoring') or {}
        if not isinstance(scoring_data, dict):
            raise ValueError("'scoring' must be a mapping")
        scoring = ScoringConfig(
            max_score=scoring_data.get('max_score', 100)
        )

        return cls(detectors=detectors, scoring=scoring)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'detectors': {
                name: config.to_dict()
                for name, config in self.detectors.items()
            },
            'scoring': {
                'max_score': self.scoring.max_score,
            },
        }

    def save_to_file(self, file_path: str):
        """Save configuration to a file."""
        path = Path(file_path)

        with open(path, 'w', encoding='utf-8') as f:
            if path.suffix.lower() in ['.yml', '.yaml']:
                yaml.dump(self.to_dict(), f, default_flow_style=False, indent=2)
            else:
                json.dump(self.to_dict(), f, indent=2)
