"""
Core analysis service.

This service orchestrates one analysis from dump to result:
1. Build the canonical document of the dump's tier
2. Derive the device identifier
3. Run the enabled detectors
4. Score (native tier) and render the risk report

Every call creates its own error handling service, so concurrent analyses
never share state. Failures are contained at each stage; a failure that
escapes them all produces a degraded result instead of an exception.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional, Union

from hunter_core.heuristics import BaseDetector, create_registry
from hunter_core.infrastructure.shared.error_handling import ErrorHandlingService, ErrorSeverity
from hunter_core.logic.models import (
    FAILED_SCORE, AnalysisConfig, AnalysisResult, AnalysisTier, DetectorResult, PlatformRawDump
)
from .document_builder import NativeDocumentBuilder, PlatformDocumentBuilder
from .identity_service import IdentityService
from .scoring_service import ScoringService

Document = Dict[str, Any]


class AnalysisService:
    """
    Main analysis service for both collection tiers.

    Holds only configuration and detector instances; all per-call state
    lives in local variables.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize the analysis service.

        Args:
            config: Analysis configuration (defaults when omitted)
        """
        self.config = config or AnalysisConfig()
        self.logger = logging.getLogger("analysis.service")

        self.detector_registry = create_registry()
        self.detectors: List[BaseDetector] = self.detector_registry.create_instances(self.config)
        self.scoring_service = ScoringService(self.config.scoring)

        self.logger.debug(f"Detectors enabled: {self.config.get_enabled_detectors()}")

    def build_native_document(self, raw: Optional[str],
                              error_service: Optional[ErrorHandlingService] = None) -> Document:
        """Canonical document of a native dump."""
        return NativeDocumentBuilder(error_service=error_service or ErrorHandlingService()).build(raw)

    def build_platform_document(self, dump: Union[PlatformRawDump, Dict[str, Any], str, None],
                                error_service: Optional[ErrorHandlingService] = None) -> Document:
        """Canonical document of a platform dump."""
        return PlatformDocumentBuilder(error_service=error_service or ErrorHandlingService()).build(dump)

    def analyze_native(self, raw: Optional[str]) -> AnalysisResult:
        """
        Analyze a native dump.

        Args:
            raw: Native dump text

        Returns:
            Native result; ``risk_score`` is -1 when the analysis failed
        """
        error_service = ErrorHandlingService()
        try:
            document = self.build_native_document(raw, error_service)
            return self._evaluate(document, AnalysisTier.NATIVE, error_service)
        except Exception as e:
            return self._failed(AnalysisTier.NATIVE, e, error_service)

    def analyze_native_document(self, document: Union[Document, str]) -> AnalysisResult:
        """
        Analyze a native document built elsewhere.

        Args:
            document: Native document, as a dict or a JSON object string

        Returns:
            Native result; ``risk_score`` is -1 when the document is unusable
        """
        error_service = ErrorHandlingService()
        try:
            if isinstance(document, str):
                document = json.loads(document)
            if not isinstance(document, dict):
                raise ValueError(f"native document must be a JSON object, got {type(document).__name__}")
            return self._evaluate(document, AnalysisTier.NATIVE, error_service)
        except Exception as e:
            return self._failed(AnalysisTier.NATIVE, e, error_service)

    def analyze_platform(self, dump: Union[PlatformRawDump, Dict[str, Any], str, None]) -> AnalysisResult:
        """
        Analyze a platform dump.

        Args:
            dump: Raw dump instance, collector payload dict or JSON string

        Returns:
            Platform result
        """
        error_service = ErrorHandlingService()
        try:
            document = self.build_platform_document(dump, error_service)
            return self._evaluate(document, AnalysisTier.PLATFORM, error_service)
        except Exception as e:
            return self._failed(AnalysisTier.PLATFORM, e, error_service)

    def _evaluate(self, document: Document, tier: AnalysisTier,
                  error_service: ErrorHandlingService) -> AnalysisResult:
        start_time = time.time()

        identity = IdentityService(error_service)
        if tier == AnalysisTier.PLATFORM:
            device_id = identity.derive_platform_id(document)
        else:
            device_id = identity.derive_native_id(document)

        results = self._run_detectors(document, tier, error_service)
        flags = {result.name: result.flagged for result in results}
        findings = tuple(finding for result in results if result.flagged for finding in result.findings)

        if tier == AnalysisTier.PLATFORM:
            score = 0
            report = self.scoring_service.platform_report(results)
        else:
            score = self.scoring_service.calculate_score(results)
            report = self.scoring_service.native_report(results, score)

        self.logger.info(
            f"{tier.value} analysis completed in {time.time() - start_time:.3f}s: "
            f"{len(findings)} findings, score {score}"
        )
        if error_service.has_errors:
            self.logger.warning(f"Contained errors during {tier.value} analysis: {error_service.get_error_stats()}")

        return AnalysisResult(
            tier=tier,
            device_id=device_id,
            risk_report=report,
            is_emulator=flags.get('emulator', False),
            is_rooted=flags.get('root', False),
            is_debug_mode=flags.get('debug', False),
            has_injection=flags.get('injection', False),
            risk_score=score,
            findings=findings
        )

    def _run_detectors(self, document: Document, tier: AnalysisTier,
                       error_service: ErrorHandlingService) -> List[DetectorResult]:
        """Run every enabled detector that understands the tier."""
        results = []
        for detector in self.detectors:
            if not detector.applies_to(tier):
                continue
            result = detector.run(document, tier, error_service)
            if result.flagged:
                self.logger.debug(f"[{detector.name}] fired with {len(result.findings)} findings")
            results.append(result)
        return results

    def _failed(self, tier: AnalysisTier, error: Exception,
                error_service: ErrorHandlingService) -> AnalysisResult:
        error_service.record(error, f"analyze_{tier.value}", "analysis_service", severity=ErrorSeverity.ERROR)
        message = str(error) or type(error).__name__
        return AnalysisResult(
            tier=tier,
            device_id="",
            risk_report=self.scoring_service.failure_report(message),
            risk_score=FAILED_SCORE
        )
