"""
Main use case for analyzing a device dump.

Loads a dump file of either collection tier, runs the analysis pipeline and
returns a JSON-serializable dictionary for the command line.
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from hunter_core.infrastructure.logging import enhanced_logger
from hunter_core.logic.models import AnalysisConfig, AnalysisResult
from hunter_core.logic.services import AnalysisService

NATIVE_MODE = "native"
PLATFORM_MODE = "platform"


class AnalyzeDeviceUseCase:
    """
    Use case for analyzing collected device dumps.

    Supports two modes:
    1. ``native``: a native probe dump (text with ``=== Title ===`` banners)
    2. ``platform``: a platform collector dump (JSON object)
    """

    def __init__(self, config_path: Optional[str] = None, verbose: bool = False,
                 log_directory: Optional[str] = None):
        """
        Initialize the analyze device use case.

        Args:
            config_path: Path to configuration file (optional)
            verbose: Enable verbose logging (optional)
            log_directory: Directory for a timestamped log file (optional)
        """
        self.logger = logging.getLogger("analyze.device")
        self.verbose = verbose
        self.log_directory = log_directory

        if config_path and Path(config_path).exists():
            self.config = AnalysisConfig.from_file(config_path)
            self.logger.info(f"Loaded configuration from {config_path}")
        else:
            if config_path:
                self.logger.warning(f"Configuration file {config_path} not found, using defaults")
            self.config = AnalysisConfig()

        self.analysis_service = AnalysisService(self.config)

    def execute_native(self, dump_path: str, document_only: bool = False) -> Dict[str, Any]:
        """
        Analyze a native dump file.

        Args:
            dump_path: Path to the native dump text
            document_only: Return the canonical document instead of the result

        Returns:
            Native result or canonical document as a dictionary
        """
        raw = Path(dump_path).read_text(encoding='utf-8', errors='replace')
        enhanced_logger.create_analysis_log_entry("loading", "Native dump loaded", {
            "dump_path": dump_path,
            "characters": len(raw)
        })

        if document_only:
            return self.analysis_service.build_native_document(raw)

        result = self.analysis_service.analyze_native(raw)
        self._log_result(result)
        return result.to_dict()

    def execute_platform(self, dump_path: str, document_only: bool = False) -> Dict[str, Any]:
        """
        Analyze a platform dump file.

        Args:
            dump_path: Path to the platform dump JSON
            document_only: Return the canonical document instead of the result

        Returns:
            Platform result or canonical document as a dictionary
        """
        with open(dump_path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
        if not isinstance(payload, dict):
            raise ValueError(f"Platform dump must be a JSON object, got {type(payload).__name__}")

        enhanced_logger.create_analysis_log_entry("loading", "Platform dump loaded", {
            "dump_path": dump_path,
            "fields": len(payload)
        })

        if document_only:
            return self.analysis_service.build_platform_document(payload)

        result = self.analysis_service.analyze_platform(payload)
        self._log_result(result)
        return result.to_dict()

    def execute_from_command_line(self, args: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Execute from command line with error handling for JSON output.

        Usage: ``<native|platform> <dump_path> [--document]``

        Args:
            args: Command line arguments (defaults to sys.argv)

        Returns:
            Analysis result, canonical document or error as a dictionary
        """
        if args is None:
            args = sys.argv[1:]
        args = list(args)

        document_only = "--document" in args
        if document_only:
            args.remove("--document")

        if len(args) != 2 or args[0] not in (NATIVE_MODE, PLATFORM_MODE):
            return {"error": self._get_usage_message()}

        mode, dump_path = args
        if not Path(dump_path).is_file():
            return {"error": f"Dump file '{dump_path}' not found"}

        start_time = time.time()
        try:
            enhanced_logger.setup_logging(self.log_directory, f"{mode}_analysis.log", verbose=self.verbose)
            enhanced_logger.log_system_info()
            enhanced_logger.create_analysis_log_entry("start", "Analysis initiated", {
                "mode": mode,
                "dump_path": dump_path,
                "document_only": document_only
            })

            if mode == NATIVE_MODE:
                output = self.execute_native(dump_path, document_only)
            else:
                output = self.execute_platform(dump_path, document_only)

            self.logger.info(f"{mode} analysis finished in {time.time() - start_time:.2f}s")
            enhanced_logger.finalize_logging(success=True)
            return output

        except Exception as e:
            enhanced_logger.log_error_details(e, f"{mode} analysis of {dump_path} failed")
            enhanced_logger.finalize_logging(success=False)
            return {
                "error": str(e),
                "error_type": type(e).__name__,
            }
        finally:
            enhanced_logger.cleanup()

    def _log_result(self, result: AnalysisResult):
        enhanced_logger.create_analysis_log_entry("analysis", "Risk analysis completed", {
            "tier": result.tier.value,
            "risk_score": result.risk_score,
            "findings": len(result.findings),
            "failed": result.failed
        })

    def _get_usage_message(self) -> str:
        """Get usage message for command line interface."""
        return """Usage:
        hunter-core [--verbose|-v] native <dump.txt> [--document]     # Analyze a native probe dump
        hunter-core [--verbose|-v] platform <dump.json> [--document]  # Analyze a platform collector dump

        Options:
        --document         Print the canonical document instead of the risk result
        --config <path>    Configuration file (YAML or JSON)
        --log-dir <dir>    Also write a timestamped log file to this directory
        --verbose, -v      Enable verbose logging
        --version          Print the version and exit"""
