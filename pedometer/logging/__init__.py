"""
Structured logging setup for the pedometer service
"""

from pedometer.logging.setup import get_logger, setup_logging

__all__ = ["setup_logging", "get_logger"]
