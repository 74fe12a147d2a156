"""Configuration and logging utilities."""
from .config import Config
from .logger import configure_logging, setup_logging, log_timing

__all__ = ["Config", "configure_logging", "setup_logging", "log_timing"]
