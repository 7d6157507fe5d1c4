"""Service-wide utilities"""

from .logging_config import setup_logging, get_logger, Colors

__all__ = ["setup_logging", "get_logger", "Colors"]
