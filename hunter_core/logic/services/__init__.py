"""
Domain services for hunter-core.

This module contains the document building, identity, scoring and analysis
services.
"""

from .analysis_service import AnalysisService
from .document_builder import (
    NativeDocumentBuilder,
    PlatformDocumentBuilder,
    build_native_document,
    build_platform_document,
)
from .identity_service import IdentityService
from .scoring_service import ScoringService

__all__ = [
    'AnalysisService',
    'NativeDocumentBuilder',
    'PlatformDocumentBuilder',
    'build_native_document',
    'build_platform_document',
    'IdentityService',
    'ScoringService',
]
