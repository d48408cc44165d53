"""
Structured ``event key=value`` logging on top of the standard ``logging`` module.

Every log line names an event and carries its context as keyword
arguments::

    logger = Logger("exporter")
    logger.info("results_loaded", measurement="1001", stored=42)
    # info exporter results_loaded measurement=1001 stored=42

[StructuredFormatter][atlas_exporter.core.logger.StructuredFormatter]
renders those keyword arguments. The models, utils and translators layers
use plain ``logging.getLogger()`` with ``"event key=%s"`` messages; once
[setup_logging()][atlas_exporter.core.logger.setup_logging] has run, both
styles share one line format.

With ``json_output=True`` a ``Logger`` emits one JSON object per line
instead, for log shippers that parse JSON.
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, ClassVar


def _truncate(value: Any, max_value_length: int | None) -> str:
    text = str(value)
    if max_value_length and len(text) > max_value_length:
        dropped = len(text) - max_value_length
        return f"{text[:max_value_length]}...<truncated {dropped} chars>"
    return text


def _quote(text: str) -> str:
    """Wrap *text* in double quotes when it would be ambiguous unquoted."""
    if text and not any(ch in text for ch in " =\"'"):
        return text
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Render *kwargs* as ``key=value`` pairs joined by spaces.

    Values are stringified and truncated to *max_value_length* characters
    (``None`` keeps them whole). Empty values and values containing spaces,
    ``=`` or quotes are double-quoted with backslash escaping.

    Returns:
        ``prefix`` followed by the pairs, or ``""`` when *kwargs* is empty.
    """
    if not kwargs:
        return ""
    pairs = (f"{key}={_quote(_truncate(value, max_value_length))}" for key, value in kwargs.items())
    return prefix + " ".join(pairs)


class StructuredFormatter(logging.Formatter):
    """Line format ``<level> <logger> <message> [key=value ...]``.

    Key-value pairs come from the ``structured_kv`` attribute that
    [Logger][atlas_exporter.core.logger.Logger] attaches to its records;
    records from plain stdlib loggers have none and print their message
    as-is. Tracebacks follow on the next lines.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        line += format_kv_pairs(getattr(record, "structured_kv", {}))
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class Logger:
    """Named logger whose methods take event context as keyword arguments.

    Args:
        name: Name of the underlying ``logging.Logger``.
        json_output: Emit JSON lines instead of ``key=value`` extras.
        max_value_length: Truncation limit for each context value.
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = (
            self._DEFAULT_MAX_VALUE_LENGTH if max_value_length is None else max_value_length
        )

    @property
    def name(self) -> str:
        return self._logger.name

    def _json_line(self, level: int, msg: str, context: dict[str, Any]) -> str:
        return json.dumps(
            {
                "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
                "level": logging.getLevelName(level).lower(),
                "logger": self._logger.name,
                "message": msg,
                **context,
            },
            default=str,
        )

    def _extra(self, context: dict[str, Any]) -> dict[str, Any]:
        if not context:
            return {}
        limit = self._max_value_length
        return {
            "structured_kv": {
                key: _truncate(value, limit) if limit and len(str(value)) > limit else value
                for key, value in context.items()
            }
        }

    def log(self, level: int, msg: str, *, exc_info: bool = False, **context: Any) -> None:
        """Log event *msg* at *level* with *context* as key-value pairs."""
        if not self._logger.isEnabledFor(level):
            return
        if self._json_output:
            self._logger.log(level, self._json_line(level, msg, context), exc_info=exc_info)
        else:
            self._logger.log(level, msg, extra=self._extra(context), exc_info=exc_info)

    def debug(self, msg: str, **context: Any) -> None:
        self.log(logging.DEBUG, msg, **context)

    def info(self, msg: str, **context: Any) -> None:
        self.log(logging.INFO, msg, **context)

    def warning(self, msg: str, **context: Any) -> None:
        self.log(logging.WARNING, msg, **context)

    def error(self, msg: str, **context: Any) -> None:
        self.log(logging.ERROR, msg, **context)

    def exception(self, msg: str, **context: Any) -> None:
        """Log at ERROR with the traceback of the exception being handled."""
        self.log(logging.ERROR, msg, exc_info=True, **context)


def setup_logging(level: str = "INFO") -> None:
    """Route all logging through one ``StructuredFormatter`` stream handler on the root logger.

    A handler installed by an earlier call is replaced, so calling this
    again only changes the level.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())
