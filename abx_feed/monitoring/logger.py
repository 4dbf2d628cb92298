"""Structured logging for the feed client."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional, Union


PACKAGE_LOGGER = "abx_feed"

_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
_DATEFMT = '%Y-%m-%d %H:%M:%S'


class FeedLogger:
    """
    Structured logger for the feed client with keyword argument support.
    """
    
    def __init__(self, name: str):
        """
        Initialize feed logger.
        
        Args:
            name: Logger name (typically __name__)
        """
        self.logger = logging.getLogger(name)
    
    def _format_message(self, msg: str, **kwargs) -> str:
        """Format message with keyword arguments."""
        if kwargs:
            extra = ' | '.join(f'{k}={v}' for k, v in kwargs.items())
            return f"{msg} | {extra}"
        return msg
    
    def debug(self, msg: str, **kwargs) -> None:
        """Log debug message."""
        self.logger.debug(self._format_message(msg, **kwargs))
    
    def info(self, msg: str, **kwargs) -> None:
        """Log info message."""
        self.logger.info(self._format_message(msg, **kwargs))
    
    def warning(self, msg: str, **kwargs) -> None:
        """Log warning message."""
        self.logger.warning(self._format_message(msg, **kwargs))
    
    def error(self, msg: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message."""
        self.logger.error(self._format_message(msg, **kwargs), exc_info=exc_info)
    
    def critical(self, msg: str, **kwargs) -> None:
        """Log critical message."""
        self.logger.critical(self._format_message(msg, **kwargs))


_loggers: Dict[str, FeedLogger] = {}


def get_logger(name: str) -> FeedLogger:
    """
    Get or create a feed logger.
    
    Args:
        name: Logger name (typically __name__)
    
    Returns:
        FeedLogger instance
    """
    if name not in _loggers:
        _loggers[name] = FeedLogger(name)
    return _loggers[name]


def setup_logger(
    log_file: Optional[str] = None,
    level: Union[str, int] = "INFO"
) -> logging.Logger:
    """
    Attach console and optional rotating file handlers to the package logger.
    
    Safe to call more than once; previous handlers are replaced.
    
    Args:
        log_file: Path for a rotating log file (10MB x 5), or None
        level: Logging level name or number
    
    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    
    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(level)
    
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    
    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)
    
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=10*1024*1024, # 10MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    
    return root
