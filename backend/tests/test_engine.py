"""Tests for the validation engine: dedup, short-circuit, gating and ordering."""

import pytest

from conftest import ExplodingCondition, FormStates, RecordingCondition
from rulegate.validators import (
    EqualTo,
    Field,
    GatedValidation,
    NotBlank,
    ValidationEngine,
    has_all,
    has_flag,
)

FIELD = Field(name="field", value="")


def validating(field, *conditions):
    validator = ValidationEngine()
    for condition in conditions:
        validator.validate_that(field, condition)
    return validator.report().as_dict()


class TestSingleField:
    """First failing rule per field wins."""

    def test_no_rules_gives_empty_report(self):
        """An engine with no rules applied reports nothing."""
        report = ValidationEngine().report()
        assert len(report) == 0
        assert report.passed is True

    def test_single_failing_rule(self, never_good_enough):
        """A failing rule records the condition description."""
        assert validating(FIELD, never_good_enough) == {"field": "never good enough"}

    def test_first_failure_wins(self, never_good_enough, other_reasons):
        """A second failing rule on the same field is not reported."""
        assert validating(FIELD, never_good_enough, other_reasons) == {"field": "never good enough"}

    def test_later_rules_are_not_evaluated_after_failure(self, never_good_enough, other_reasons):
        """Once a field has failed its later conditions are never called."""
        validating(FIELD, never_good_enough, other_reasons)
        assert never_good_enough.calls == [""]
        assert other_reasons.calls == []

    def test_passing_rule_does_not_block(self, always_perfect, never_good_enough):
        """A passing rule leaves later rules for the field eligible."""
        assert validating(FIELD, always_perfect, never_good_enough) == {"field": "never good enough"}
        assert always_perfect.calls == [""]
        assert never_good_enough.calls == [""]

    def test_only_passing_rules(self, always_perfect):
        """Passing rules produce no entry."""
        assert validating(FIELD, always_perfect, always_perfect) == {}

    def test_identity_is_by_name_only(self, never_good_enough, other_reasons):
        """Two fields with the same name and different values share dedup state."""
        validator = ValidationEngine()
        validator.validate_that(Field(name="field", value="one"), never_good_enough)
        validator.validate_that(Field(name="field", value="two"), other_reasons)
        assert len(validator.report()) == 1
        assert other_reasons.calls == []

    def test_condition_sees_field_value(self):
        """The condition is tested against the field's raw value."""
        validator = ValidationEngine()
        validator.validate_that(Field(name="user", value="admin"), EqualTo("admin"))
        validator.validate_that(Field(name="pass", value="x"), EqualTo("admin"))
        assert validator.report().as_dict() == {"pass": "equal to 'admin'"}


class TestMultipleFields:
    """Errors across fields."""

    def test_each_field_reported_once(self, never_good_enough):
        """Distinct fields each get their own entry."""
        validator = ValidationEngine()
        validator.validate_that(Field(name="a"), never_good_enough)
        validator.validate_that(Field(name="b"), never_good_enough)
        assert validator.report().as_dict() == {"a": "never good enough", "b": "never good enough"}

    def test_report_order_follows_first_failure(self, never_good_enough, other_reasons):
        """Interleaved fields are reported in order of their first failure."""
        validator = ValidationEngine()
        validator.validate_that(Field(name="c"), other_reasons)
        validator.validate_that(Field(name="a"), never_good_enough)
        validator.validate_that(Field(name="c"), never_good_enough)
        validator.validate_that(Field(name="b"), never_good_enough)
        validator.validate_that(Field(name="a"), other_reasons)

        report = validator.report()
        assert report.field_names() == ["c", "a", "b"]
        assert [e.message for e in report] == ["other reasons", "never good enough", "never good enough"]

    def test_chaining(self, never_good_enough):
        """validate_that returns the engine."""
        validator = ValidationEngine()
        returned = (
            validator.validate_that(Field(name="a"), never_good_enough)
            .validate_that(Field(name="b"), never_good_enough)
        )
        assert returned is validator
        assert len(validator) == 2
        assert validator.has_errors is True


class TestGating:
    """Rules that depend on state flags."""

    def test_ignores_rule_depending_on_unknown_state(self, validator, never_good_enough):
        """A closed gate never evaluates the rule."""
        validator.add_flags([])
        validator.gate_on(has_flag(FormStates.BOX_IS_TICKED)).validate_that(Field(name="amount"), never_good_enough)
        assert len(validator.report()) == 0
        assert never_good_enough.calls == []

    def test_applies_rule_depending_on_known_state(self, validator, never_good_enough):
        """An open gate forwards the rule."""
        validator.add_flags([FormStates.BOX_IS_TICKED])
        validator.gate_on(has_flag(FormStates.BOX_IS_TICKED)).validate_that(Field(name="amount"), never_good_enough)
        assert len(validator.report()) == 1

    def test_applies_rule_depending_on_many_states(self, validator, never_good_enough):
        """Gate on several flags at once."""
        validator.add_flags([FormStates.BOX_IS_TICKED, FormStates.SUM_IS_PROVIDED])
        validator.gate_on(
            has_all(FormStates.BOX_IS_TICKED, FormStates.SUM_IS_PROVIDED)
        ).validate_that(Field(name="amount"), never_good_enough)
        assert len(validator.report()) == 1

    def test_many_rules_through_one_gate(self, validator, never_good_enough):
        """Chained calls on a gated view stay gated and all forward."""
        validator.add_flags([FormStates.BOX_IS_TICKED])
        gated = validator.gate_on(has_flag(FormStates.BOX_IS_TICKED))
        returned = (
            gated.validate_that(Field(name="amount"), never_good_enough)
            .validate_that(Field(name="another"), never_good_enough)
        )
        assert isinstance(returned, GatedValidation)
        assert returned is gated
        assert len(validator.report()) == 2

    def test_closed_gate_leaves_dedup_state_untouched(self, validator, never_good_enough, other_reasons):
        """A rule skipped by a closed gate does not block later rules."""
        validator.gate_on(has_flag(FormStates.BOX_IS_TICKED)).validate_that(Field(name="amount"), never_good_enough)
        validator.validate_that(Field(name="amount"), other_reasons)
        assert validator.report().as_dict() == {"amount": "other reasons"}

    def test_closed_gate_skips_passing_rule(self, validator, always_perfect):
        """A closed gate does not evaluate a rule that would pass either."""
        validator.gate_on(has_flag(FormStates.BOX_IS_TICKED)).validate_that(Field(name="amount"), always_perfect)
        assert always_perfect.calls == []
        assert len(validator.report()) == 0

    def test_gate_shares_dedup_state(self, validator, never_good_enough, other_reasons):
        """A field failed through the engine is skipped through a gate too."""
        validator.add_flags([FormStates.BOX_IS_TICKED])
        validator.validate_that(Field(name="amount"), never_good_enough)
        validator.gate_on(FormStates.BOX_IS_TICKED).validate_that(Field(name="amount"), other_reasons)
        assert validator.report().as_dict() == {"amount": "never good enough"}
        assert other_reasons.calls == []

    def test_predicate_evaluated_per_call(self, validator, never_good_enough):
        """Flags added after the gate is built are seen by later calls."""
        gated = validator.gate_on(has_flag(FormStates.BOX_IS_TICKED))
        gated.validate_that(Field(name="before"), never_good_enough)
        validator.add_flags([FormStates.BOX_IS_TICKED])
        gated.validate_that(Field(name="after"), never_good_enough)
        assert validator.report().field_names() == ["after"]

    def test_gate_on_bare_flag(self, validator, never_good_enough):
        """A single flag is accepted in place of a predicate."""
        validator.gate_on(FormStates.SUM_IS_PROVIDED).validate_that(Field(name="sum"), never_good_enough)
        assert len(validator.report()) == 0
        validator.add_flags([FormStates.SUM_IS_PROVIDED])
        validator.gate_on(FormStates.SUM_IS_PROVIDED).validate_that(Field(name="sum"), never_good_enough)
        assert len(validator.report()) == 1

    def test_derived_flag_opens_gate(self, validator, always_perfect, never_good_enough):
        """A passing derivation adds the flag used by a later gated rule."""
        validator.states().add(FormStates.BOX_IS_TICKED).when(Field(name="tick", value="yes"), always_perfect)
        validator.gate_on(has_flag(FormStates.BOX_IS_TICKED)).validate_that(Field(name="amount"), never_good_enough)
        assert len(validator.report()) == 1


class TestFailures:
    """Broken conditions and predicates propagate unchanged."""

    def test_condition_error_propagates(self, validator):
        """Exceptions from a condition are not caught or wrapped."""
        with pytest.raises(RuntimeError, match="broken condition"):
            validator.validate_that(FIELD, ExplodingCondition())
        assert len(validator.report()) == 0

    def test_field_not_recorded_after_condition_error(self, validator, never_good_enough):
        """A raising rule does not block later rules for the field."""
        with pytest.raises(RuntimeError):
            validator.validate_that(FIELD, ExplodingCondition())
        validator.validate_that(FIELD, never_good_enough)
        assert validator.report().as_dict() == {"field": "never good enough"}

    def test_describe_error_propagates(self, validator):
        """Exceptions from describe() propagate and leave no partial record."""

        class Undescribable(RecordingCondition):
            def describe(self) -> str:
                raise ValueError("no words")

        with pytest.raises(ValueError, match="no words"):
            validator.validate_that(FIELD, Undescribable(False, ""))
        assert len(validator) == 0
        validator.validate_that(FIELD, NotBlank())
        assert len(validator) == 1

    def test_predicate_error_propagates(self, validator, never_good_enough):
        """Exceptions from a gate predicate propagate."""

        def broken(flags):
            raise KeyError("flags")

        with pytest.raises(KeyError):
            validator.gate_on(broken).validate_that(FIELD, never_good_enough)
        assert never_good_enough.calls == []


class TestReportSnapshot:
    """report() is read-only."""

    def test_report_does_not_mutate(self, validator, never_good_enough):
        """Calling report() repeatedly yields equal reports."""
        validator.validate_that(FIELD, never_good_enough)
        assert validator.report() == validator.report()
        assert len(validator) == 1

    def test_report_is_a_snapshot(self, validator, never_good_enough):
        """A report taken earlier is not affected by later failures."""
        first = validator.report()
        validator.validate_that(FIELD, never_good_enough)
        assert len(first) == 0
        assert len(validator.report()) == 1
