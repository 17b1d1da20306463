"""Configuration management"""
import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Model artefact (joblib): a fitted regressor or {"model": ..., "columns": [...]}
MODEL_FILE: str = os.getenv("BETTERREST_MODEL_PATH", "sleep_calculator.joblib")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def validate_config() -> None:
    """Validate configuration"""
    if not MODEL_FILE:
        raise ValueError("BETTERREST_MODEL_PATH must not be empty")
    if LOG_LEVEL not in _LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LEVELS)}, got {LOG_LEVEL!r}")


def configure_logging() -> None:
    validate_config()
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, LOG_LEVEL))
