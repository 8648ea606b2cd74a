"""Structured JSON logging for schema graph loading.

Every record is one JSON object per line. All components taking part in one
load share an ``operationId`` so the records of a run can be grouped.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, TextIO, Union
from uuid import uuid4


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def levelno(self) -> int:
        return logging.WARNING if self is LogLevel.WARN else getattr(logging, self.name)


# Record attributes copied to the JSON entry when set
RECORD_FIELDS = ("schema", "operationId", "sourceURI", "localPath", "errorCode")


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname.lower(),
            "component": getattr(record, "component", "xsdgraph"),
            "message": record.getMessage(),
        }
        entry.update((name, getattr(record, name)) for name in RECORD_FIELDS if hasattr(record, name))

        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            entry.update(fields)

        return json.dumps(entry, default=str)


def _stream_for(destination: str) -> TextIO:
    return sys.stdout if destination == "stdout" else sys.stderr


class XSDLogger:
    """Component logger writing structured records to stdout or stderr.

    Keyword arguments of the logging methods become fields of the JSON entry.
    """

    def __init__(self, level: Union[LogLevel, str] = LogLevel.INFO, component: str = "xsdgraph",
                 destination: str = "stderr", operation_id: Optional[str] = None):
        self.level = LogLevel(level)
        self.component = component
        self.destination = destination
        self.operation_id = operation_id or str(uuid4())

        self.logger = logging.getLogger(f"xsdgraph.{component}")
        self.logger.setLevel(self.level.levelno)

        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        handler = logging.StreamHandler(_stream_for(destination))
        handler.setFormatter(StructuredFormatter())
        self.logger.addHandler(handler)

        # JSON reports on stdout must stay parseable
        self.logger.propagate = False

    def child(self, component: str) -> "XSDLogger":
        """Logger for a collaborating component, sharing this logger's operation."""
        return XSDLogger(self.level, component, self.destination, self.operation_id)

    def _log(self, levelno: int, message: str, fields: dict) -> None:
        if not self.logger.isEnabledFor(levelno):
            return
        self.logger.log(levelno, message, extra={
            "component": self.component,
            "operationId": self.operation_id,
            "extra": fields,
        })

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, kwargs)

    def warn(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, kwargs)

    def schema_event(self, event: str, schema_uri: str, **kwargs) -> None:
        """Log a document lifecycle event (fetched, mirrored, parsed, cached, reused, evicted)."""
        self.debug(f"Schema {event}", schema=schema_uri, **kwargs)

    def performance_metric(self, metric_name: str, value: Any, unit: str = "", **kwargs) -> None:
        self.info(
            f"Performance: {metric_name}",
            metricName=metric_name,
            value=value,
            unit=unit,
            **kwargs
        )


def create_logger(level: Union[LogLevel, str] = LogLevel.INFO, component: str = "xsdgraph",
                  destination: Optional[str] = None) -> XSDLogger:
    """Create a configured logger instance."""
    return XSDLogger(level=level, component=component, destination=destination or "stderr")
