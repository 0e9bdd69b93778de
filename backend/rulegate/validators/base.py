"""Base rule target: anything that accepts (field, condition) validation calls.

The engine implements it directly; gated views implement it by deciding per
call whether to forward to the engine.
"""

from abc import ABC, abstractmethod

from rulegate.validators.conditions import Condition
from rulegate.validators.fields import Field


class Validate(ABC):
    """Abstract target of validation rules.

    Contract:
        - validate_that() evaluates immediately; nothing is queued
        - validate_that() returns a Validate so rules can be chained
        - no errors are raised for failing rules, only for broken conditions
    """

    @abstractmethod
    def validate_that(self, field: Field, condition: Condition) -> "Validate":
        """Apply one rule to one field.

        Args:
            field: The named value under validation
            condition: What a passing value looks like

        Returns:
            A Validate to chain the next rule on
        """
        ...
