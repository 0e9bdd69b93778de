"""Validation models: the recorded error and the read-only report over them.

A ValidationError is business feedback for the person who filled in the record,
not a fault. It is never raised.
"""

from typing import Iterator, Sequence, TypeVar, overload

from pydantic import BaseModel, Field

from rulegate.validators.sinks import ErrorSink, MapErrorSink

SinkT = TypeVar("SinkT", bound=ErrorSink)


class ValidationError(BaseModel):
    """A single failed rule: the field and the description of what would have passed."""

    field_name: str = Field(description="Name of the field the rule was applied to")
    message: str = Field(description="Description of the first condition the field failed")

    model_config = {"frozen": True}

    def describe_to(self, sink: ErrorSink) -> None:
        sink.write(self.field_name, self.message)


class ErrorReport(Sequence[ValidationError]):
    """Ordered, read-only view of the errors recorded during one validation run.

    Order is evaluation order of each field's first failing rule. An empty
    report means the record is valid under every rule that applied.
    """

    __slots__ = ("_errors",)

    def __init__(self, errors: Sequence[ValidationError] = ()):
        self._errors = tuple(errors)

    @overload
    def __getitem__(self, index: int) -> ValidationError: ...

    @overload
    def __getitem__(self, index: slice) -> "ErrorReport": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ErrorReport(self._errors[index])
        return self._errors[index]

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(self._errors)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorReport):
            return self._errors == other._errors
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._errors)

    def __repr__(self) -> str:
        return f"ErrorReport({list(self._errors)!r})"

    @property
    def passed(self) -> bool:
        return not self._errors

    def field_names(self) -> list[str]:
        return [e.field_name for e in self._errors]

    def render(self, sink: SinkT) -> SinkT:
        """Push every error to the sink in evaluation order.

        Args:
            sink: Any ErrorSink (map, list, console, log)

        Returns:
            The same sink, for chaining
        """
        for error in self._errors:
            error.describe_to(sink)
        return sink

    def as_dict(self) -> dict[str, str]:
        """Render into an insertion-ordered mapping of field name to message."""
        return self.render(MapErrorSink()).errors
