"""
Domain models for the hunter-core analysis pipeline.

These models represent the business domain and are independent of any
parsing or presentation concerns.
"""

from .detection import Finding, Severity
from .analysis_result import AnalysisResult, AnalysisTier, DetectorResult, FAILED_SCORE
from .configuration import AnalysisConfig, DetectorConfig, ScoringConfig, DEFAULT_DETECTOR_WEIGHTS
from .probe import ProbeRecord, ProbeStatus, ProbeValue, PropertyMap, ValueKind
from .raw_dump import PlatformRawDump

__all__ = [
    'Finding',
    'Severity',
    'AnalysisResult',
    'AnalysisTier',
    'DetectorResult',
    'FAILED_SCORE',
    'AnalysisConfig',
    'DetectorConfig',
    'ScoringConfig',
    'DEFAULT_DETECTOR_WEIGHTS',
    'ProbeRecord',
    'ProbeStatus',
    'ProbeValue',
    'PropertyMap',
    'ValueKind',
    'PlatformRawDump',
]
