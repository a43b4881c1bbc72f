"""Configuration management for the bigo MCP server."""

import argparse
import os
import sys
from typing import List, Optional

import yaml

from bigo_mcp.core.exceptions import ConfigurationError
from bigo_mcp.core.logging import configure_logging, get_logger
from bigo_mcp.models.config import AnalysisConfig

# Global variable for config path (will be set by parse_args_and_get_config)
CONFIG_PATH: Optional[str] = None

# Active analysis configuration (defaults until a file is loaded)
_analysis_config: AnalysisConfig = AnalysisConfig()


def validate_config_file(config_path: str) -> AnalysisConfig:
    """Validate a bigo.yaml file.

    Args:
        config_path: Path to bigo.yaml file

    Returns:
        Validated AnalysisConfig model

    Raises:
        ConfigurationError: If config file is invalid
    """
    if not os.path.exists(config_path):
        raise ConfigurationError(config_path, "File does not exist")

    if not os.path.isfile(config_path):
        raise ConfigurationError(config_path, "Path is not a file")

    try:
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(config_path, f"YAML parsing failed: {e}") from e
    except OSError as e:
        raise ConfigurationError(config_path, f"Failed to read file: {e}") from e

    if config_data is None:
        raise ConfigurationError(config_path, "Config file is empty")

    if not isinstance(config_data, dict):
        raise ConfigurationError(config_path, "Config must be a YAML dictionary")

    try:
        return AnalysisConfig(**config_data)
    except Exception as e:
        raise ConfigurationError(config_path, f"Validation failed: {e}") from e


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    prog = None
    if sys.argv[0].endswith("main.py"):
        prog = "python main.py"

    parser = argparse.ArgumentParser(
        prog=prog,
        description="bigo MCP Server - Estimates Big-O time and space complexity of Python code via Model Context Protocol",
        epilog="""
environment variables:
  BIGO_CONFIG        Path to bigo.yaml file (overridden by --config flag)
  LOG_LEVEL          Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)
  LOG_FILE           Path to log file (logs to stderr by default)
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to bigo.yaml file with detector thresholds and traversal limits",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        metavar="LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Can also be set via LOG_LEVEL env var. Default: INFO",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        default=None,
        help="Path to log file (logs to stderr by default). Can also be set via LOG_FILE env var.",
    )
    return parser


def _resolve_config_path(args: argparse.Namespace) -> Optional[str]:
    """Precedence: --config flag > BIGO_CONFIG env > None."""
    return args.config or os.environ.get("BIGO_CONFIG") or None


def _load_config(config_path: Optional[str]) -> AnalysisConfig:
    """Validate the config file, exiting with status 1 when it is invalid.

    Args:
        config_path: Path to config file, or None for defaults

    Returns:
        Loaded configuration
    """
    if config_path is None:
        return AnalysisConfig()
    try:
        return validate_config_file(config_path)
    except ConfigurationError as e:
        logger = get_logger("config")
        logger.error("config_validation_failed", config_path=config_path, error=str(e))
        sys.exit(1)


def _configure_logging_from_args(args: argparse.Namespace) -> None:
    """Configure logging based on command-line arguments and environment.

    Precedence: --log-level/--log-file flags > env vars > defaults

    Args:
        args: Parsed command-line arguments.
    """
    log_level = args.log_level or os.environ.get("LOG_LEVEL", "INFO")
    log_file = args.log_file or os.environ.get("LOG_FILE")
    configure_logging(log_level=log_level, log_file=log_file)


def parse_args_and_get_config(argv: Optional[List[str]] = None) -> AnalysisConfig:
    """Parse command-line arguments, configure logging and load the analysis config."""
    global CONFIG_PATH, _analysis_config

    parser = _create_argument_parser()
    args = parser.parse_args(argv)

    _configure_logging_from_args(args)

    CONFIG_PATH = _resolve_config_path(args)
    _analysis_config = _load_config(CONFIG_PATH)

    get_logger("config").info(
        "analysis_config_loaded",
        config_path=CONFIG_PATH,
        max_traversal_depth=_analysis_config.max_traversal_depth,
        overrides=sorted(_analysis_config.min_confidence),
    )
    return _analysis_config


def get_analysis_config() -> AnalysisConfig:
    """Return the active analysis configuration."""
    return _analysis_config


def set_analysis_config(config: AnalysisConfig) -> None:
    global _analysis_config
    _analysis_config = config
