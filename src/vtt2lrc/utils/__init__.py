"""Utility modules."""

from .logging import setup_logging, get_logger
from .performance import PerformanceMonitor, timing_decorator
from .validation import (
    normalize_extensions,
    validate_vbr_quality,
    validate_bitrate,
    build_mp3_mode,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "PerformanceMonitor",
    "timing_decorator",
    "normalize_extensions",
    "validate_vbr_quality",
    "validate_bitrate",
    "build_mp3_mode",
]
