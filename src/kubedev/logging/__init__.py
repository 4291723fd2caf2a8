"""Logging configuration for kubedev."""

from kubedev.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
