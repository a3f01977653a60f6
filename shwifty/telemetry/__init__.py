"""Convenience exports for shwifty telemetry utilities."""

from . import logger

__all__ = ["logger"]
