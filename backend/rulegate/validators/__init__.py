"""Rule gate: two-phase, first-failure-wins validation of named fields.

Usage:
    from rulegate.validators import ValidationEngine, Field, NotBlank

    engine = ValidationEngine()
    engine.validate_that(Field(name="user", value=""), NotBlank())
    engine.report().as_dict()   # {"user": "not blank"}
"""

from rulegate.validators.base import Validate
from rulegate.validators.conditions import (
    All,
    AnyOf,
    Condition,
    EqualTo,
    LengthBetween,
    Matches,
    Not,
    NotBlank,
    OneOf,
    Predicate,
)
from rulegate.validators.engine import (
    Describable,
    GatedValidation,
    ValidationEngine,
    validate_record,
)
from rulegate.validators.fields import ErrorId, Field, field_from
from rulegate.validators.models import ErrorReport, ValidationError
from rulegate.validators.sinks import (
    ConsoleErrorSink,
    ErrorSink,
    ListErrorSink,
    LogErrorSink,
    MapErrorSink,
)
from rulegate.validators.states import (
    ActiveFlagSet,
    FlagPredicate,
    StateDerivation,
    StateFlag,
    has_all,
    has_any,
    has_flag,
    lacks,
)

__all__ = [
    # Engine
    "Validate",
    "ValidationEngine",
    "GatedValidation",
    "Describable",
    "validate_record",
    # Fields and results
    "Field",
    "ErrorId",
    "field_from",
    "ValidationError",
    "ErrorReport",
    # Conditions
    "Condition",
    "All",
    "AnyOf",
    "Not",
    "EqualTo",
    "NotBlank",
    "LengthBetween",
    "Matches",
    "OneOf",
    "Predicate",
    # States
    "StateFlag",
    "ActiveFlagSet",
    "StateDerivation",
    "FlagPredicate",
    "has_flag",
    "has_all",
    "has_any",
    "lacks",
    # Sinks
    "ErrorSink",
    "MapErrorSink",
    "ListErrorSink",
    "ConsoleErrorSink",
    "LogErrorSink",
]
