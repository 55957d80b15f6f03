import sys
import json
import logging
from pathlib import Path

import yaml

from . import __version__


def _setup_basic_logging(verbose=False):
    # log to stderr only; stdout carries the JSON result
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _default_config_path():
    # when frozen by PyInstaller, sys._MEIPASS points to bundle root
    if getattr(sys, "frozen", False):
        base = Path(getattr(sys, "_MEIPASS", Path.cwd()))
        return base / "config.yaml"
    # source mode: config lives next to this file
    return Path(__file__).parent / "config.yaml"


def _pop_option(argv, name):
    """Remove ``name <value>`` from argv and return the value."""
    if name not in argv:
        return None
    i = argv.index(name)
    if i + 1 >= len(argv):
        del argv[i]
        return None
    value = argv[i + 1]
    del argv[i:i + 2]
    return value


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)

    # Fast path for version
    if "--version" in argv:
        print(__version__)
        return 0

    verbose = "--verbose" in argv or "-v" in argv
    for flag in ("--verbose", "-v"):
        while flag in argv:
            argv.remove(flag)

    _setup_basic_logging(verbose)

    config_path = _pop_option(argv, "--config")
    log_directory = _pop_option(argv, "--log-dir")

    if not config_path:
        default_config = _default_config_path()
        if default_config.exists():
            config_path = str(default_config)

    # Lazy import to keep --version fast
    from .application.analyze_device import AnalyzeDeviceUseCase

    try:
        use_case = AnalyzeDeviceUseCase(config_path, verbose=verbose, log_directory=log_directory)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logging.getLogger("cli").error(f"Invalid configuration: {e}")
        print(json.dumps({"error": f"Invalid configuration: {e}", "error_type": type(e).__name__}, indent=2))
        return 2

    result = use_case.execute_from_command_line(argv)

    # Enrich with metadata (camelCase)
    if isinstance(result, dict):
        result.setdefault("metadata", {})
        result["metadata"]["engineVersion"] = __version__
        result["metadata"]["schemaVersion"] = 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 1 if "error" in result else 0


if __name__ == "__main__":
    sys.exit(main())
