"""Log record formatting for key-value text and JSON line output."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName", "color_message"}


def logs_record_attributes(record: logging.LogRecord) -> dict[str, Any]:
    """Return the structured attributes attached to a record through `extra=`.

    Args:
        record: Log record.

    Returns:
        dict[str, Any]: Extra attributes in insertion order.
    """

    return {key: value for key, value in vars(record).items() if key not in _RESERVED_RECORD_ATTRIBUTES}


def _logs_record_time(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds")


class KeyValueFormatter(logging.Formatter):
    """Render records as `time=... level=... logger=... msg="..." key=value` lines."""

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "time": _logs_record_time(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields.update(logs_record_attributes(record))
        line = " ".join(f"{key}={_logs_quote(value)}" for key, value in fields.items())
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _logs_quote(value: Any) -> str:
    text = str(value)
    if not text or any(character.isspace() or character in '"=' for character in text):
        return json.dumps(text, ensure_ascii=False)
    return text


class JsonLineFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": _logs_record_time(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(logs_record_attributes(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def logs_configure(json_output: bool = False, level: int = logging.INFO, stream: TextIO | None = None) -> logging.Handler:
    """Install a single stdout handler on the root logger.

    Previously installed root handlers are removed, so calling this twice does
    not duplicate output.

    Args:
        json_output: Emit JSON lines instead of key-value text.
        level: Root logger level.
        stream: Output stream; defaults to stdout.

    Returns:
        logging.Handler: The installed handler.
    """

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(JsonLineFormatter() if json_output else KeyValueFormatter())

    root_logger = logging.getLogger()
    for existing_handler in list(root_logger.handlers):
        root_logger.removeHandler(existing_handler)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return handler
