"""Login form validation.

The anonymous user may log in without a password. Everyone else is
AUTHENTICATED, and only then do the password rules apply.
"""

from typing import Any

from rulegate.validators import (
    ActiveFlagSet,
    Describable,
    EqualTo,
    Field,
    LengthBetween,
    Matches,
    Not,
    NotBlank,
    StateFlag,
    ValidationEngine,
    has_flag,
)

ANONYMOUS = "anonymous coward"
MIN_PASSWORD_LENGTH = 8


class LoginState(StateFlag):
    AUTHENTICATED = "authenticated"


class UserName:
    def __init__(self, field: Field):
        self.field = field

    def describe_states(self, flags: ActiveFlagSet) -> None:
        flags.add(LoginState.AUTHENTICATED).when(self.field, Not(EqualTo(ANONYMOUS)))

    def describe_to(self, validator: ValidationEngine) -> None:
        validator.validate_that(self.field, NotBlank())


class Password:
    def __init__(self, field: Field):
        self.field = field

    def describe_to(self, validator: ValidationEngine) -> None:
        # Ordered most to least important; only the first failure is shown.
        (
            validator.gate_on(has_flag(LoginState.AUTHENTICATED))
            .validate_that(self.field, NotBlank())
            .validate_that(self.field, LengthBetween(min=MIN_PASSWORD_LENGTH))
            .validate_that(self.field, Matches(r".*\d.*", description="containing at least one digit"))
        )


class Login(Describable):
    """A submitted login form."""

    def __init__(self, user_name: UserName, password: Password):
        self.user_name = user_name
        self.password = password

    @classmethod
    def from_form(cls, form: dict[str, Any], user_field: str = "user_name", password_field: str = "password") -> "Login":
        """Adapt a raw form mapping. Missing entries become empty fields."""
        return cls(
            UserName(Field.of(user_field, form.get(user_field))),
            Password(Field.of(password_field, form.get(password_field))),
        )

    def describe_states(self, flags: ActiveFlagSet) -> None:
        self.user_name.describe_states(flags)

    def describe_to(self, validator: ValidationEngine) -> None:
        self.user_name.describe_to(validator)
        self.password.describe_to(validator)
