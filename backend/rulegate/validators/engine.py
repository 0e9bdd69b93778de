"""Validation Engine: two-phase, first-failure-wins rule evaluation.

Phase one derives state flags from the record. Phase two applies validation
rules, some of them gated on those flags. For each field only the first
failing rule is reported; once a field has failed, later rules for it are not
evaluated at all.

Usage:
    engine = ValidationEngine()
    engine.states().add(LoginState.AUTHENTICATED).when(user_name, Not(EqualTo("anonymous coward")))
    engine.validate_that(user_name, NotBlank())
    engine.gate_on(has_flag(LoginState.AUTHENTICATED)).validate_that(password, LengthBetween(min=8))
    report = engine.report()
"""

import time
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Union

import structlog

from rulegate.config import get_settings
from rulegate.validators.base import Validate
from rulegate.validators.conditions import Condition
from rulegate.validators.fields import ErrorId, Field
from rulegate.validators.models import ErrorReport, ValidationError
from rulegate.validators.states import (
    ActiveFlagSet,
    FlagPredicate,
    StateFlag,
    has_flag,
)

logger = structlog.get_logger()


class ValidationEngine(Validate):
    """Accumulates validation errors for one run, at most one per field name.

    Design principles:
        - Eager: every rule runs when it is called, nothing is deferred
        - Short-circuit: a field with a recorded error is never tested again
        - Owned state: errors, recorded ids and flags live on the instance
        - Not thread-safe: create one engine per run and keep it on one thread
    """

    def __init__(self, flags: Iterable[StateFlag] = (), trace: Optional[bool] = None):
        """Initialize an empty run.

        Args:
            flags: Flags already known to be active
            trace: Emit per-rule debug events. Defaults to TRACE_RULES.
        """
        self._errors: list[ValidationError] = []
        self._recorded: set[ErrorId] = set()
        self._flags = ActiveFlagSet(flags)
        self.trace = get_settings().TRACE_RULES if trace is None else trace

    def validate_that(self, field: Field, condition: Condition) -> "ValidationEngine":
        """Apply one rule unless the field has already failed.

        Args:
            field: The named value under validation
            condition: What a passing value looks like

        Returns:
            This engine, for chaining
        """
        error_id = field.describe_identity()
        if error_id in self._recorded:
            if self.trace:
                logger.debug("rule_skipped_already_failed", field=field.name)
            return self

        if not field.test(condition):
            error = field.describe_error(condition)
            self._recorded.add(error_id)
            self._errors.append(error)
            if self.trace:
                logger.debug("rule_failed", field=field.name, message=error.message)

        return self

    def gate_on(self, predicate: Union[FlagPredicate, StateFlag]) -> "GatedValidation":
        """Return a view that only forwards rules while the predicate holds.

        Args:
            predicate: Callable over the active flags, or a single flag that
                must be active

        Returns:
            GatedValidation sharing this engine's errors and flags
        """
        if isinstance(predicate, StateFlag):
            predicate = has_flag(predicate)
        return GatedValidation(self, predicate)

    def add_flags(self, flags: Iterable[StateFlag]) -> None:
        """Union flags into the active set. Flags are never removed."""
        added = self._flags.update(flags)
        if added and self.trace:
            logger.debug("flags_added", flags=[repr(f) for f in added])

    def states(self) -> ActiveFlagSet:
        """The active flag set, for fluent derivation: engine.states().add(X).when(...)."""
        return self._flags

    @property
    def flags(self) -> ActiveFlagSet:
        return self._flags

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def report(self) -> ErrorReport:
        """Snapshot of the recorded errors in evaluation order."""
        return ErrorReport(self._errors)


class GatedValidation(Validate):
    """Forwards rules to an engine only while a flag predicate holds.

    The predicate is evaluated on every call, against the engine's current
    flags. A closed gate is a complete no-op: the condition is not tested and
    the engine's state is untouched.
    """

    def __init__(self, engine: ValidationEngine, predicate: FlagPredicate):
        self.engine = engine
        self.predicate = predicate

    def validate_that(self, field: Field, condition: Condition) -> "GatedValidation":
        if self.predicate(self.engine.flags):
            self.engine.validate_that(field, condition)
        elif self.engine.trace:
            logger.debug("rule_skipped_gate_closed", field=field.name)
        return self


# ── Record orchestration ──


class Describable(ABC):
    """An application record that knows its own states and rules.

    describe_states() runs first and may only add flags. describe_to() then
    applies the record's rules to the engine.
    """

    def describe_states(self, flags: ActiveFlagSet) -> None:
        """Derive flags from the record. Records without states skip this."""

    @abstractmethod
    def describe_to(self, validator: ValidationEngine) -> None:
        ...


def validate_record(record: Describable, engine: Optional[ValidationEngine] = None) -> ErrorReport:
    """Run both phases for one record on a fresh engine and return its report.

    Args:
        record: The record to validate
        engine: Optional pre-built engine (e.g. with flags already known)

    Returns:
        ErrorReport in evaluation order; empty when the record is valid
    """
    start_time = time.perf_counter()
    engine = engine if engine is not None else ValidationEngine()

    record.describe_states(engine.states())
    record.describe_to(engine)
    report = engine.report()

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info(
        "validation_complete",
        record=type(record).__name__,
        passed=report.passed,
        total_errors=len(report),
        flags=sorted(repr(f) for f in engine.flags),
        duration_ms=round(total_duration, 2),
    )

    return report
