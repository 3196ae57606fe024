"""
Diagnostic records and the sink that routes them into logging.

Records use "{}" placeholders in their message format; each argument is
rendered on its own indented block so that request and template dumps stay
readable in logs.

Two output modes are available through setup_logging():
- human: [LEVEL] message
- json:  {"level":"INFO","ts":"...","msg":"...","type":"...","httpRequest":{...}}
"""

import json
import logging
import sys
import textwrap
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, TextIO, Tuple

LOGGER_NAME = "mocktemplates"

# Finer than DEBUG; used for per-query and per-render detail
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def format_log_message(message_format: str, *arguments: Any) -> str:
    """
    Substitute each {} placeholder with its argument on an indented block.

    Placeholders without a matching argument are left as-is.

    Example:
        format_log_message("evaluated jsonPath:{}as:{}", "$.a", 5)
        -> "evaluated jsonPath:\\n\\n  $.a\\n\\nas:\\n\\n  5\\n\\n"
    """
    parts = message_format.split("{}")
    output = [parts[0]]
    for index, part in enumerate(parts[1:]):
        if index < len(arguments):
            output.append("\n\n" + textwrap.indent(str(arguments[index]), "  ") + "\n\n")
        else:
            output.append("{}")
        output.append(part)
    return "".join(output)


class LogMessageType(Enum):
    """Category of a diagnostic record."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    EXCEPTION = "EXCEPTION"
    TEMPLATE_GENERATED = "TEMPLATE_GENERATED"


_DEFAULT_TYPES = {
    TRACE: LogMessageType.TRACE,
    logging.DEBUG: LogMessageType.DEBUG,
    logging.INFO: LogMessageType.INFO,
}


@dataclass(frozen=True)
class LogEntry:
    """A structured, leveled diagnostic event."""

    level: int
    message_format: str
    arguments: Tuple[Any, ...] = ()
    http_request: Any = None
    throwable: Optional[BaseException] = None
    type: Optional[LogMessageType] = None

    def __post_init__(self):
        if self.type is None:
            default_type = LogMessageType.EXCEPTION if self.throwable is not None else _DEFAULT_TYPES.get(
                self.level, LogMessageType.INFO
            )
            object.__setattr__(self, "type", default_type)
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def message(self) -> str:
        return format_log_message(self.message_format, *self.arguments)


@dataclass
class DiagnosticsSink:
    """
    Receives LogEntry records and writes them to a stdlib logger.

    log_event() never raises: a broken handler or an argument whose str()
    fails must not reach the rendering path.
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(LOGGER_NAME))

    def is_enabled(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def log_event(self, entry: LogEntry) -> None:
        try:
            if not self.logger.isEnabledFor(entry.level):
                return
            self.logger.log(
                entry.level,
                "%s",
                entry.message,
                exc_info=entry.throwable,
                extra={"log_entry": entry},
            )
        except Exception as e:
            sys.stderr.write(f"failed to log diagnostic record {entry.message_format!r}: {e!r}\n")


class HumanFormatter(logging.Formatter):
    """Format: [LEVEL] message"""

    def format(self, record: logging.LogRecord) -> str:
        text = f"[{record.levelname}] {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class JSONFormatter(logging.Formatter):
    """Formatter for JSON lines output (machine-readable)."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.now(timezone.utc).isoformat(),
            "msg": record.getMessage(),
        }

        entry = getattr(record, "log_entry", None)
        if isinstance(entry, LogEntry):
            log_entry["type"] = entry.type.value if entry.type else None
            request = entry.http_request
            if request is not None:
                log_entry["httpRequest"] = request.to_dict() if hasattr(request, "to_dict") else str(request)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def parse_level(name: str) -> int:
    """Map a level name (including TRACE) to its numeric value."""
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def setup_logging(level: int = logging.INFO, log_format: str = "human", stream: Optional[TextIO] = None) -> None:
    """
    Configure the mocktemplates logger.

    Args:
        level: Minimum log level (TRACE is accepted)
        log_format: "human" or "json"
        stream: Output stream (default: stderr)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    if log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    elif log_format == "human":
        formatter = HumanFormatter()
    else:
        raise ValueError(f"Unknown log format: {log_format}")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
