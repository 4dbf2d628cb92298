"""
Feed client configuration.

Loaded from a YAML file with optional sections::

    connection:
      host: 127.0.0.1
      port: 3000
      receive_timeout: null     # seconds; null blocks forever
    recovery:
      backfill_delay_ms: 100
    export:
      output_file: output.json
      format: json              # json | csv
    monitoring:
      log_level: INFO
      log_file: null

Host and port are immutable once the config is built.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .constants import (
    DEFAULT_HOST, DEFAULT_PORT, DEFAULT_BACKFILL_DELAY_MS,
    DEFAULT_OUTPUT_FILE, DEFAULT_LOG_LEVEL, ExportFormat
)
from .exceptions import InvalidConfigError, MissingConfigError


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class FeedConfig:
    """Connection, recovery, export and logging settings for one run."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    backfill_delay_ms: int = DEFAULT_BACKFILL_DELAY_MS
    receive_timeout: Optional[float] = None
    output_file: str = DEFAULT_OUTPUT_FILE
    output_format: ExportFormat = ExportFormat.JSON
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None
    
    def __post_init__(self):
        """Validate settings."""
        if not self.host:
            raise InvalidConfigError("host must not be empty")
        
        if not isinstance(self.port, int) or isinstance(self.port, bool) or not 1 <= self.port <= 65535:
            raise InvalidConfigError(f"port must be 1-65535, got {self.port!r}", port=self.port)
        
        if not _is_number(self.backfill_delay_ms):
            raise InvalidConfigError(
                f"backfill_delay_ms must be a number, got {self.backfill_delay_ms!r}",
                backfill_delay_ms=self.backfill_delay_ms
            )
        if self.backfill_delay_ms < 0:
            raise InvalidConfigError(
                f"backfill_delay_ms cannot be negative: {self.backfill_delay_ms}",
                backfill_delay_ms=self.backfill_delay_ms
            )
        
        if self.receive_timeout is not None and not _is_number(self.receive_timeout):
            raise InvalidConfigError(
                f"receive_timeout must be a number or null, got {self.receive_timeout!r}",
                receive_timeout=self.receive_timeout
            )
        if self.receive_timeout is not None and self.receive_timeout <= 0:
            raise InvalidConfigError(
                f"receive_timeout must be positive or null: {self.receive_timeout}",
                receive_timeout=self.receive_timeout
            )
        
        fmt = self.output_format
        if not isinstance(fmt, ExportFormat):
            fmt = str(fmt).lower()
        try:
            object.__setattr__(self, 'output_format', ExportFormat(fmt))
        except ValueError:
            raise InvalidConfigError(
                f"Unknown output format: {self.output_format}",
                supported=[f.value for f in ExportFormat]
            )
        
        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            raise InvalidConfigError(f"Unknown log level: {self.log_level}", supported=list(_LOG_LEVELS))
        object.__setattr__(self, 'log_level', level)
    
    @property
    def backfill_delay_seconds(self) -> float:
        return self.backfill_delay_ms / 1000.0
    
    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FeedConfig":
        """
        Build a config from a parsed YAML mapping.
        
        Missing sections and keys fall back to defaults.
        """
        data = data or {}
        if not isinstance(data, dict):
            raise InvalidConfigError("Configuration root must be a mapping")
        
        connection = data.get('connection') or {}
        recovery = data.get('recovery') or {}
        export = data.get('export') or {}
        monitoring = data.get('monitoring') or {}
        
        kwargs: Dict[str, Any] = {}
        _copy(connection, 'host', kwargs)
        _copy(connection, 'port', kwargs)
        _copy(connection, 'receive_timeout', kwargs)
        _copy(recovery, 'backfill_delay_ms', kwargs)
        _copy(export, 'output_file', kwargs)
        _copy(export, 'format', kwargs, target='output_format')
        _copy(monitoring, 'log_level', kwargs)
        _copy(monitoring, 'log_file', kwargs)
        
        return cls(**kwargs)
    
    @classmethod
    def from_yaml(cls, config_file: str) -> "FeedConfig":
        """
        Load configuration from a YAML file.
        
        Raises:
            MissingConfigError if the file does not exist
            InvalidConfigError if it cannot be parsed or holds invalid values
        """
        path = Path(config_file)
        if not path.exists():
            raise MissingConfigError(f"Config file not found: {path}", path=str(path))
        
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidConfigError(f"Config file is not valid YAML: {e}", path=str(path))
        
        return cls.from_dict(data)
    
    def with_overrides(self, **overrides: Any) -> "FeedConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _copy(section: Dict[str, Any], key: str, kwargs: Dict[str, Any], target: Optional[str] = None) -> None:
    if key in section:
        kwargs[target or key] = section[key]
