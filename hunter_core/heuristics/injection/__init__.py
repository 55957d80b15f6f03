"""
Injection framework and risk tag detection.
"""

from .injection_detection import InjectionDetector
from .risk_tag_analysis import RiskTagDetector

__all__ = ['InjectionDetector', 'RiskTagDetector']
