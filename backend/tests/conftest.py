"""Pytest configuration and shared fixtures for rulegate tests."""

import pytest

from rulegate.config import get_settings
from rulegate.validators import Condition, StateFlag, ValidationEngine


class FormStates(StateFlag):
    BOX_IS_TICKED = "box_is_ticked"
    SUM_IS_PROVIDED = "sum_is_provided"


class OtherStates(StateFlag):
    # Same value as FormStates.BOX_IS_TICKED on purpose
    BOX_IS_TICKED = "box_is_ticked"


class RecordingCondition(Condition):
    """Condition with a fixed outcome that counts how often it is tested."""

    def __init__(self, outcome: bool, description: str):
        self.outcome = outcome
        self.description = description
        self.calls: list[str] = []

    def test(self, value: str) -> bool:
        self.calls.append(value)
        return self.outcome

    def describe(self) -> str:
        return self.description


class ExplodingCondition(Condition):
    """Condition that raises when tested."""

    def test(self, value: str) -> bool:
        raise RuntimeError("broken condition")

    def describe(self) -> str:
        return "never described"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def validator() -> ValidationEngine:
    return ValidationEngine()


@pytest.fixture
def never_good_enough() -> RecordingCondition:
    return RecordingCondition(False, "never good enough")


@pytest.fixture
def other_reasons() -> RecordingCondition:
    return RecordingCondition(False, "other reasons")


@pytest.fixture
def always_perfect() -> RecordingCondition:
    return RecordingCondition(True, "should never happen")
