"""Error sinks: where a report's (field, message) pairs end up.

A sink is anything with ``write(field_name, message)``. The ones here cover the
usual consumers: a mapping for form rendering, a flat list, a text stream and
the structured log.
"""

import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

import structlog

logger = structlog.get_logger()


class ErrorSink(ABC):
    """Receives errors one at a time, in evaluation order."""

    @abstractmethod
    def write(self, field_name: str, message: str) -> None:
        ...


class MapErrorSink(ErrorSink):
    """Collects errors into an insertion-ordered dict keyed by field name.

    A second write for the same field overwrites the first. Reports never
    contain two errors for one field, so this only matters when one sink is
    shared across several reports.
    """

    def __init__(self, errors: Optional[dict[str, str]] = None):
        self.errors = errors if errors is not None else {}

    def write(self, field_name: str, message: str) -> None:
        self.errors[field_name] = message


class ListErrorSink(ErrorSink):
    """Collects errors as (field_name, message) tuples."""

    def __init__(self):
        self.errors: list[tuple[str, str]] = []

    def write(self, field_name: str, message: str) -> None:
        self.errors.append((field_name, message))


class ConsoleErrorSink(ErrorSink):
    """Writes one "<field> <message>" line per error to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def write(self, field_name: str, message: str) -> None:
        self.stream.write(f"{field_name} {message}\n")


class LogErrorSink(ErrorSink):
    """Emits a validation_error event per error on the structured log."""

    def __init__(self, log=None, **context):
        self.log = (log or logger).bind(**context)

    def write(self, field_name: str, message: str) -> None:
        self.log.info("validation_error", field=field_name, message=message)
