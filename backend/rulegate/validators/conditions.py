"""Conditions: named predicates over a raw field value.

A condition answers two questions: does a value pass, and what does a passing
value look like. The description is used verbatim as the error message, so it
should read naturally after a field name ("password at least 8 characters long").

Conditions compose with ``&`` (all must pass), ``|`` (any may pass) and ``~``
(negation). The engine only relies on ``test`` and ``describe``; any object
providing both can be used in place of the classes below.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional, Union


class Condition(ABC):
    """Base class for all conditions.

    Contract:
        - test() and describe() are deterministic and side-effect-free
        - test() never performs I/O
        - exceptions raised by either are programming errors and propagate
    """

    @abstractmethod
    def test(self, value: str) -> bool:
        """Return True when the value satisfies this condition."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Describe, in words, what a passing value looks like."""
        ...

    def __and__(self, other: "Condition") -> "All":
        if isinstance(self, All):
            return All(*self.conditions, other)
        if isinstance(other, All):
            return All(self, *other.conditions)
        return All(self, other)

    def __or__(self, other: "Condition") -> "AnyOf":
        if isinstance(self, AnyOf):
            return AnyOf(*self.conditions, other)
        if isinstance(other, AnyOf):
            return AnyOf(self, *other.conditions)
        return AnyOf(self, other)

    def __invert__(self) -> "Condition":
        if isinstance(self, Not):
            return self.condition
        return Not(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.describe()}>"


# ── Composites ──


class All(Condition):
    """Every child condition must pass (AND). Stops at the first failure."""

    def __init__(self, *conditions: Condition):
        if not conditions:
            raise ValueError("All requires at least one condition")
        self.conditions = list(conditions)

    def test(self, value: str) -> bool:
        return all(c.test(value) for c in self.conditions)

    def describe(self) -> str:
        return " and ".join(c.describe() for c in self.conditions)


class AnyOf(Condition):
    """At least one child condition must pass (OR). Stops at the first success."""

    def __init__(self, *conditions: Condition):
        if not conditions:
            raise ValueError("AnyOf requires at least one condition")
        self.conditions = list(conditions)

    def test(self, value: str) -> bool:
        return any(c.test(value) for c in self.conditions)

    def describe(self) -> str:
        return " or ".join(c.describe() for c in self.conditions)


class Not(Condition):
    """Negates a condition."""

    def __init__(self, condition: Condition):
        self.condition = condition

    def test(self, value: str) -> bool:
        return not self.condition.test(value)

    def describe(self) -> str:
        return f"not {self.condition.describe()}"


# ── Value conditions ──


class EqualTo(Condition):
    """Value must equal an expected string."""

    def __init__(self, expected: str):
        self.expected = expected

    def test(self, value: str) -> bool:
        return value == self.expected

    def describe(self) -> str:
        return f"equal to {self.expected!r}"


class NotBlank(Condition):
    """Value must contain something other than whitespace."""

    def test(self, value: str) -> bool:
        return bool(value and value.strip())

    def describe(self) -> str:
        return "not blank"


class LengthBetween(Condition):
    """Value length must fall inside an inclusive range.

    Either bound may be omitted, but not both.
    """

    def __init__(self, min: Optional[int] = None, max: Optional[int] = None):
        if min is None and max is None:
            raise ValueError("LengthBetween requires min, max or both")
        if min is not None and min < 0:
            raise ValueError(f"min length cannot be negative: {min}")
        if max is not None and max < 0:
            raise ValueError(f"max length cannot be negative: {max}")
        if min is not None and max is not None and min > max:
            raise ValueError(f"min length ({min}) cannot be greater than max ({max})")
        self.min = min
        self.max = max

    def test(self, value: str) -> bool:
        length = len(value)
        if self.min is not None and length < self.min:
            return False
        if self.max is not None and length > self.max:
            return False
        return True

    def describe(self) -> str:
        if self.min is not None and self.max is not None:
            if self.min == self.max:
                return f"exactly {self.min} characters long"
            return f"between {self.min} and {self.max} characters long"
        if self.min is not None:
            return f"at least {self.min} characters long"
        return f"at most {self.max} characters long"


class Matches(Condition):
    """Whole value must match a regular expression."""

    def __init__(self, pattern: Union[str, re.Pattern], description: Optional[str] = None):
        self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.description = description

    def test(self, value: str) -> bool:
        return self.regex.fullmatch(value) is not None

    def describe(self) -> str:
        if self.description:
            return self.description
        return f"matching {self.regex.pattern!r}"


class OneOf(Condition):
    """Value must be one of an allowed set of strings."""

    def __init__(self, values: Iterable[str], case_sensitive: bool = True):
        self.values = list(values)
        if not self.values:
            raise ValueError("OneOf requires at least one allowed value")
        self.case_sensitive = case_sensitive
        if case_sensitive:
            self._allowed = set(self.values)
        else:
            self._allowed = {v.lower() for v in self.values}

    def test(self, value: str) -> bool:
        if not self.case_sensitive:
            value = value.lower()
        return value in self._allowed

    def describe(self) -> str:
        return "one of " + ", ".join(repr(v) for v in self.values)


class Predicate(Condition):
    """Wraps a plain callable with a description.

    Exceptions raised by the callable are not caught.
    """

    def __init__(self, fn: Callable[[str], Any], description: str):
        self.fn = fn
        self.description = description

    def test(self, value: str) -> bool:
        return bool(self.fn(value))

    def describe(self) -> str:
        return self.description
