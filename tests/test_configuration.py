"""
Tests for the analysis configuration model.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import hunter_core
from hunter_core.logic.models import DEFAULT_DETECTOR_WEIGHTS, AnalysisConfig, DetectorConfig, ScoringConfig


def test_defaults():
    """Every detector is enabled with its default weight."""
    config = AnalysisConfig()
    assert config.get_enabled_detectors() == ["emulator", "root", "debug", "injection", "risk_tags"]
    assert {name: c.weight for name, c in config.detectors.items()} == DEFAULT_DETECTOR_WEIGHTS
    assert config.scoring.max_score == 100


def test_from_dict_fills_missing_detectors():
    """Partial configuration keeps defaults for everything it leaves out."""
    config = AnalysisConfig.from_dict({
        "detectors": {"debug": {"weight": 25, "parameters": {"usb_plug_type": "usb"}}},
        "scoring": {"max_score": 90},
    })
    assert config.get_detector_config("debug").weight == 25
    assert config.get_detector_config("debug").get_parameter("usb_plug_type") == "usb"
    assert config.get_detector_config("root").weight == 30
    assert config.scoring.max_score == 90


@pytest.mark.parametrize(
    "data",
    [
        {"detectors": {"telemetry": {}}},
        {"detectors": {"root": {"weight": -1}}},
        {"detectors": {"root": {"weight": "high"}}},
        {"detectors": {"root": {"parameters": ["x"]}}},
        {"scoring": {"max_score": 0}},
        {"scoring": {"max_score": "high"}},
        {"scoring": 5},
        {"detectors": ["emulator", "root"]},
        {"detectors": {"emulator": 5}},
        {"detectors": {"root": ["weight", 30]}},
        ["not", "a", "mapping"],
    ],
)
def test_invalid_configuration(data):
    """Unknown detectors, bad weights and bad scoring are rejected."""
    with pytest.raises(ValueError):
        AnalysisConfig.from_dict(data)


def test_malformed_yaml_shapes_raise_value_error(tmp_path):
    """A detector entry that is not a mapping is rejected by name."""
    path = tmp_path / "config.yaml"
    path.write_text("detectors:\n  emulator: 5\n", encoding="utf-8")
    with pytest.raises(ValueError, match="emulator"):
        AnalysisConfig.from_file(str(path))


def test_direct_validation():
    """Models validate on construction."""
    with pytest.raises(ValueError):
        DetectorConfig(name="root", weight=True)
    with pytest.raises(ValueError):
        ScoringConfig(max_score=101)


def test_yaml_and_json_files(tmp_path):
    """Configuration loads from YAML and JSON, and saves back losslessly."""
    yaml_path = tmp_path / "config.yaml"
    yaml_path.write_text("detectors:\n  injection:\n    weight: 60\nscoring:\n  max_score: 80\n", encoding="utf-8")
    config = AnalysisConfig.from_file(str(yaml_path))
    assert config.get_detector_config("injection").weight == 60
    assert config.scoring.max_score == 80

    json_path = tmp_path / "config.json"
    config.save_to_file(str(json_path))
    assert json.loads(json_path.read_text(encoding="utf-8"))["detectors"]["injection"]["weight"] == 60
    assert AnalysisConfig.from_file(str(json_path)).to_dict() == config.to_dict()

    round_trip = tmp_path / "saved.yml"
    config.save_to_file(str(round_trip))
    assert AnalysisConfig.from_file(str(round_trip)).to_dict() == config.to_dict()


def test_empty_yaml_gives_defaults(tmp_path):
    """An empty file is the default configuration."""
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert AnalysisConfig.from_file(str(path)).to_dict() == AnalysisConfig().to_dict()


def test_missing_file(tmp_path):
    """A missing configuration file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        AnalysisConfig.from_file(str(tmp_path / "absent.yaml"))


def test_packaged_configuration_matches_defaults():
    """The shipped config.yaml carries the default weights."""
    path = Path(hunter_core.__file__).parent / "config.yaml"
    config = AnalysisConfig.from_file(str(path))
    assert {name: c.weight for name, c in config.detectors.items()} == DEFAULT_DETECTOR_WEIGHTS
    assert config.get_detector_config("emulator").get_parameter("min_sensor_count") == 5
