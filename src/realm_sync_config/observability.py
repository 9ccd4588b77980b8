"""
observability.py - Structured logging for configuration building.

Provides:
- JSON log formatting
- Production logging setup
- Event helpers for locator, path and build events
"""

import json
import logging
import os


# =============================================================================
# Structured Logging
# =============================================================================

_RESERVED_RECORD_FIELDS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'taskName'
})


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra
        self._hostname = os.environ.get("HOSTNAME", "unknown")

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "hostname": self._hostname
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in record.__dict__.items():
                if key not in _RESERVED_RECORD_FIELDS:
                    try:
                        json.dumps(value)
                        log_data[key] = value
                    except (TypeError, ValueError):
                        log_data[key] = str(value)

        return json.dumps(log_data)


class ConfigLogger:
    """
    Structured logger for configuration events.

    Provides convenience methods for the events worth tracing when a
    configuration is resolved and built.
    """

    def __init__(self, name: str = "realm_sync_config"):
        self._logger = logging.getLogger(name)

    def locator_normalized(self, raw: str, url: str) -> None:
        """Log a raw identifier being normalized."""
        self._logger.debug(
            f"Normalized {raw!r} to {url}",
            extra={
                "event": "locator_normalized",
                "raw": raw,
                "url": url
            }
        )

    def path_fallback(self, strategy: str, full_path: str, limit: int) -> None:
        """Log a path fallback step being taken."""
        self._logger.info(
            f"Path exceeds {limit} bytes, falling back to {strategy}",
            extra={
                "event": "path_fallback",
                "strategy": strategy,
                "full_path": full_path,
                "limit": limit
            }
        )

    def configuration_built(
        self,
        url: str,
        path: str,
        strategy: str,
        read_only: bool = False
    ) -> None:
        """Log a configuration being built."""
        self._logger.info(
            f"Configuration built for {url}",
            extra={
                "event": "configuration_built",
                "url": url,
                "path": path,
                "strategy": strategy,
                "read_only": read_only
            }
        )

    def build_failed(self, url: str | None, error: Exception) -> None:
        """Log a failed build."""
        self._logger.warning(
            f"Configuration build failed: {error}",
            extra={
                "event": "build_failed",
                "url": url,
                "error_type": type(error).__name__,
                "error": str(error)
            }
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: str = None
) -> None:
    """
    Configure logging for production.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatting
        log_file: Optional log file path

    Raises:
        ValueError: If level is not a known log level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handlers = []

    console = logging.StreamHandler()
    if json_format:
        console.setFormatter(JSONFormatter())
    else:
        console.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
    handlers.append(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    logging.basicConfig(
        level=numeric_level,
        handlers=handlers,
        force=True
    )
