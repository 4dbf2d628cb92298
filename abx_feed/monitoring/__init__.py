"""Monitoring module - Logging, progress, reporting and export."""

from .logger import get_logger, setup_logger, FeedLogger
from .progress import ProgressBar
from .report import SessionReporter, build_summary
from .exporter import RecordExporter, records_to_frame

__all__ = [
    "get_logger",
    "setup_logger",
    "FeedLogger",
    "ProgressBar",
    "SessionReporter",
    "build_summary",
    "RecordExporter",
    "records_to_frame",
]
