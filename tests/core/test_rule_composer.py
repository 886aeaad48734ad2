"""Tests for rule composition and field constraints."""

import pytest

from formfield.core.errors import InvalidPatternError, UnknownRuleError
from formfield.core.rules import RuleName, ValidatorRegistry, build_constraints, compose_rules


@pytest.fixture
def registry(reader):
    return ValidatorRegistry(reader)


class TestComposeRules:
    def test_keys_follow_requested_order(self, registry):
        composed = compose_rules(["noSpaces", "required"], "Username", registry)
        assert list(composed) == [RuleName.NO_SPACES, RuleName.REQUIRED]

    def test_bound_validator_takes_only_value(self, registry):
        """Test the label is bound at composition time."""
        composed = compose_rules([RuleName.REQUIRED], "Username", registry)
        assert composed[RuleName.REQUIRED]("") == "The Username field is required"
        assert composed[RuleName.REQUIRED]("abc") is True

    def test_unknown_rule_raises(self, registry):
        with pytest.raises(UnknownRuleError) as exc_info:
            compose_rules(["required", "zipCode"], "Zip", registry)
        assert exc_info.value.rule == "zipCode"

    def test_unknown_rule_is_value_error(self, registry):
        with pytest.raises(ValueError):
            compose_rules(["nope"], "X", registry)

    def test_duplicates_collapse(self, registry):
        composed = compose_rules(["required", "required"], "X", registry)
        assert list(composed) == [RuleName.REQUIRED]

    def test_order_does_not_change_failures(self, registry):
        """Test the set of failing rules is independent of declared order."""
        forward = build_constraints(["otp", "noSpaces"], "Code", registry)
        backward = build_constraints(["noSpaces", "otp"], "Code", registry)
        assert forward.evaluate("1 2") == backward.evaluate("1 2")
        assert set(forward.evaluate("1 2")) == {"otp", "noSpaces"}


class TestBuildConstraints:
    def test_pattern_default_message(self, registry):
        constraints = build_constraints([], "Code", registry, pattern=r"^\d+$")
        assert constraints.evaluate("12a") == {"pattern": r"The Code field doesn't satisfy the regex ^\d+$"}

    def test_pattern_custom_error(self, registry):
        constraints = build_constraints([], "Code", registry, pattern=r"^\d+$", custom_error="Digits only")
        assert constraints.evaluate("12a") == {"pattern": "Digits only"}

    def test_pattern_uses_search(self, registry):
        """Test an unanchored pattern may match anywhere in the value."""
        constraints = build_constraints([], "Code", registry, pattern=r"\d")
        assert constraints.evaluate("abc1") == {}

    def test_invalid_pattern_raises(self, registry):
        with pytest.raises(InvalidPatternError):
            build_constraints([], "Code", registry, pattern="([a-z")

    def test_min_and_max_messages(self, registry):
        constraints = build_constraints([], "Age", registry, min_value=18, max_value=65)
        assert constraints.evaluate("17") == {"min": "The Age field must be greater than or equal to 18"}
        assert constraints.evaluate("66") == {"max": "The Age field must be less than or equal to 65"}
        assert constraints.evaluate("18") == {}

    def test_zero_bound_is_enforced(self, registry):
        constraints = build_constraints([], "Balance", registry, min_value=0)
        assert "min" in constraints.evaluate("-1")

    def test_empty_value_skips_min_max_pattern(self, registry):
        constraints = build_constraints([], "Age", registry, min_value=18, pattern=r"^\d+$")
        assert constraints.evaluate("") == {}
        assert constraints.evaluate(None) == {}

    def test_non_numeric_skips_min_max(self, registry):
        constraints = build_constraints([], "Age", registry, min_value=18, max_value=65)
        assert constraints.evaluate("abc") == {}

    def test_check_order(self, registry):
        """Test min, max, pattern, then rules (in declared order)."""
        constraints = build_constraints(["otp", "required"], "Age", registry, pattern=r"^\d+$", min_value=18)
        assert list(constraints.evaluate("5.5")) == ["min", "pattern", "otp"]

    def test_confirm_password_depends_on_password_field(self, registry):
        constraints = build_constraints(["confirmPassword"], "Confirm", registry)
        assert constraints.depends_on == ("password",)
        assert build_constraints(["required"], "X", registry).depends_on == ()
