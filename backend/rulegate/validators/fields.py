"""Fields: named raw string values under validation."""

from typing import Any, NewType, Optional

from pydantic import BaseModel, Field as ModelField

from rulegate.validators.conditions import Condition
from rulegate.validators.models import ValidationError

# Dedup key for recorded errors. Derived from the field name only.
ErrorId = NewType("ErrorId", str)


class Field(BaseModel):
    """An immutable named value.

    Two fields with the same name share an ErrorId regardless of value, so a
    failure on one blocks later rules on the other.
    """

    name: str = ModelField(min_length=1)
    value: str = ""

    model_config = {"frozen": True}

    @classmethod
    def of(cls, name: str, value: Any = None) -> "Field":
        """Build a field from a loosely typed record value.

        None becomes the empty string, anything else goes through str().
        """
        return cls(name=name, value="" if value is None else str(value))

    def test(self, condition: Condition) -> bool:
        return bool(condition.test(self.value))

    def describe_identity(self) -> ErrorId:
        return ErrorId(self.name)

    def describe_error(self, condition: Condition) -> ValidationError:
        return ValidationError(field_name=self.name, message=condition.describe())

    def __str__(self) -> str:
        return f"{self.name}={self.value!r}"


def field_from(record: dict, name: str, default: Optional[str] = None) -> Field:
    """Adapt one entry of a mapping-shaped record into a Field."""
    return Field.of(name, record.get(name, default))
