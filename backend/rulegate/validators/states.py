"""States: boolean facts derived from a record, used to switch rules on.

Applications declare their flag vocabulary as an Enum deriving from StateFlag:

    class LoginState(StateFlag):
        AUTHENTICATED = "authenticated"

Members compare by identity, so flags from two vocabularies never collide even
when they share a value.
"""

from enum import Enum
from typing import Callable, Iterable, Iterator

import structlog

from rulegate.validators.conditions import Condition
from rulegate.validators.fields import Field

logger = structlog.get_logger()


class StateFlag(Enum):
    """Base for application flag vocabularies. Declares no members itself.

    Vocabularies may not mix in a data type such as str or int: the mixin's
    __eq__ would precede Enum's in the MRO and make flags from different
    vocabularies with equal values compare equal.
    """

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        for base in cls.__mro__[1:]:
            if issubclass(base, Enum) or base is object:
                continue
            if "__eq__" in vars(base) or "__hash__" in vars(base):
                raise TypeError(
                    f"{cls.__name__} mixes {base.__name__} into StateFlag; "
                    "flags must compare by identity"
                )

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"


# Predicate over the active flags, evaluated by gated validation
FlagPredicate = Callable[["ActiveFlagSet"], bool]


def check_flags(flags: Iterable[StateFlag]) -> tuple[StateFlag, ...]:
    """Materialise flags, rejecting anything that is not a StateFlag.

    Raises:
        TypeError: if an element is not a StateFlag
    """
    flags = tuple(flags)
    for flag in flags:
        if not isinstance(flag, StateFlag):
            raise TypeError(f"Expected a StateFlag, got {type(flag).__name__}: {flag!r}")
    return flags


class ActiveFlagSet:
    """The flags that are true for one validation run.

    Membership only grows: there is no way to remove a flag. Re-adding a flag
    already present is a no-op.
    """

    __slots__ = ("_flags",)

    def __init__(self, flags: Iterable[StateFlag] = ()):
        self._flags: set[StateFlag] = set()
        self.update(flags)

    def update(self, flags: Iterable[StateFlag]) -> list[StateFlag]:
        """Union flags into the set.

        Nothing is added unless every element is a StateFlag.

        Returns:
            The flags that were not already present

        Raises:
            TypeError: if an element is not a StateFlag
        """
        added = []
        for flag in check_flags(flags):
            if flag not in self._flags:
                self._flags.add(flag)
                added.append(flag)
        return added

    def add(self, *flags: StateFlag) -> "StateDerivation":
        """Start a derivation that adds the flags when a field passes a condition.

        Usage:
            flags.add(LoginState.AUTHENTICATED).when(user_name, Not(EqualTo("anonymous coward")))
        """
        return StateDerivation(flags, self)

    def __contains__(self, flag: object) -> bool:
        return flag in self._flags

    def __iter__(self) -> Iterator[StateFlag]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def __repr__(self) -> str:
        return f"ActiveFlagSet({sorted(self._flags, key=repr)!r})"


class StateDerivation:
    """Adds flags to a target set when a field passes a condition.

    Evaluated eagerly, like a validation rule, but never records an error.
    Stateless apart from its flags and target; reusable across fields.
    """

    def __init__(self, flags: Iterable[StateFlag], target: ActiveFlagSet):
        """
        Raises:
            TypeError: if an element of flags is not a StateFlag
        """
        self.flags = check_flags(flags)
        self.target = target

    def when(self, field: Field, condition: Condition) -> "StateDerivation":
        if field.test(condition):
            added = self.target.update(self.flags)
            if added:
                logger.debug("flags_derived", field=field.name, flags=[repr(f) for f in added])
        return self


# ── Flag predicates ──


def has_flag(flag: StateFlag) -> FlagPredicate:
    """True when the flag is active."""
    return lambda flags: flag in flags


def has_all(*required: StateFlag) -> FlagPredicate:
    """True when every given flag is active."""
    return lambda flags: all(f in flags for f in required)


def has_any(*candidates: StateFlag) -> FlagPredicate:
    """True when at least one given flag is active."""
    return lambda flags: any(f in flags for f in candidates)


def lacks(flag: StateFlag) -> FlagPredicate:
    """True when the flag is not active."""
    return lambda flags: flag not in flags
