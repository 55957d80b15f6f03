"""
Enhanced logging for hunter-core command line runs.

Console output goes to stderr so stdout stays clean for the JSON result; an
optional timestamped log file keeps the full DEBUG trace of an analysis.
"""

import atexit
import logging
import platform
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class EnhancedLogger:
    """
    Logs to stderr and, when a log directory is given, to a file.

    The original root handlers are restored on cleanup so embedding
    applications keep their own logging setup.
    """

    def __init__(self):
        self.file_handlers: List[logging.FileHandler] = []
        self.original_handlers: List[logging.Handler] = []
        self.original_level = logging.WARNING
        self.log_file_path: Optional[Path] = None
        self.active = False

        atexit.register(self.cleanup)

    def setup_logging(self, output_directory: Optional[str] = None,
                      log_filename: str = "analysis.log", verbose: bool = False) -> Optional[str]:
        """
        Set up console logging and, optionally, a log file.

        Args:
            output_directory: Directory for the log file; console only when None
            log_filename: Base name of the log file, prefixed with a timestamp
            verbose: Show INFO on the console instead of WARNING and above

        Returns:
            Path to the created log file, or None
        """
        root_logger = logging.getLogger()
        self.original_handlers = root_logger.handlers[:]
        self.original_level = root_logger.level
        root_logger.handlers.clear()
        self.active = True
        self.log_file_path = None
        root_logger.setLevel(logging.DEBUG if output_directory else logging.INFO)

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
        root_logger.addHandler(console_handler)

        if output_directory:
            output_dir = Path(output_directory)
            output_dir.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.log_file_path = output_dir / f"{timestamp}_{log_filename}"

            file_handler = logging.FileHandler(self.log_file_path, mode='w', encoding='utf-8')
            file_handler.setFormatter(formatter)
            file_handler.setLevel(logging.DEBUG)
            root_logger.addHandler(file_handler)
            self.file_handlers.append(file_handler)

        logger = logging.getLogger("enhanced.logging")
        logger.info(f"Console logging level: {'INFO' if verbose else 'WARNING'}")
        if self.log_file_path:
            logger.info(f"Log file: {self.log_file_path}")

        return self.get_log_file_path()

    def log_system_info(self):
        """Log interpreter and invocation details for troubleshooting."""
        logger = logging.getLogger("system.info")
        logger.info(f"Platform: {platform.platform()}")
        logger.info(f"Python version: {platform.python_version()}")
        logger.info(f"Command line: {' '.join(sys.argv)}")

    def log_error_details(self, error: Exception, context: str = ""):
        """Log an error with its type and stack trace."""
        logger = logging.getLogger("error.details")

        if context:
            logger.error(f"Context: {context}")
        logger.error(f"{type(error).__name__}: {error}", exc_info=error)

    def create_analysis_log_entry(self, stage: str, message: str,
                                  details: Optional[Dict[str, Any]] = None):
        """Create a structured log entry for an analysis stage."""
        logger = logging.getLogger(f"analysis.{stage}")

        log_message = f"[{stage.upper()}] {message}"
        if details:
            log_message += f" | Details: {details}"

        logger.info(log_message)

    def cleanup(self):
        """Close file handlers and restore the original root handlers."""
        root_logger = logging.getLogger()

        for handler in self.file_handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.file_handlers.clear()

        if self.active:
            root_logger.handlers[:] = self.original_handlers
            root_logger.setLevel(self.original_level)
            self.original_handlers = []
            self.active = False

    def get_log_file_path(self) -> Optional[str]:
        return str(self.log_file_path) if self.log_file_path else None

    def finalize_logging(self, success: bool = True):
        """Log the completion status and flush every handler."""
        logger = logging.getLogger("enhanced.logging")

        if success:
            logger.info("Analysis completed successfully")
        else:
            logger.error("Analysis completed with errors")

        if self.log_file_path:
            logger.info(f"Log saved: {self.log_file_path}")

        for handler in logging.getLogger().handlers:
            handler.flush()


# Global instance for the command line entry point
enhanced_logger = EnhancedLogger()
