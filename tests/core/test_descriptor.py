"""Tests for field configuration, outcomes and settings."""

import pytest
from pydantic import ValidationError

from formfield.config import Settings
from formfield.core.descriptor import FieldDescriptor
from formfield.core.errors import ConstraintMisconfiguration, InvalidPatternError, UnknownRuleError
from formfield.core.rules import RuleName, ValidationOutcome, ValidationResult


class TestFieldDescriptor:
    def test_label_falls_back_to_name(self):
        assert FieldDescriptor(name="username").resolved_label == "username"
        assert FieldDescriptor(name="username", label="Username").resolved_label == "Username"

    def test_rules_resolved_once(self):
        d = FieldDescriptor(name="pw", rules=["required", RuleName.PASSWORD])
        assert d.rule_names == (RuleName.REQUIRED, RuleName.PASSWORD)
        assert d.has_rule("password")
        assert not d.has_rule(RuleName.OTP)

    def test_unknown_rule_raises(self):
        with pytest.raises(UnknownRuleError):
            FieldDescriptor(name="x", rules=["required", "postcode"])

    def test_rules_as_string_rejected(self):
        with pytest.raises(ConstraintMisconfiguration):
            FieldDescriptor(name="x", rules="required")

    def test_invalid_pattern_raises(self):
        with pytest.raises(InvalidPatternError):
            FieldDescriptor(name="x", pattern="[unclosed")

    def test_blank_name_raises(self):
        with pytest.raises(ConstraintMisconfiguration):
            FieldDescriptor(name="  ")

    def test_on_change_defaults_to_noop(self):
        d = FieldDescriptor(name="x")
        assert d.on_change("value") is None

    def test_input_type_normalized(self):
        d = FieldDescriptor(name="x", input_type=" Password ")
        assert d.input_type == "password"
        assert d.is_password


class TestValidationOutcome:
    def test_from_true(self):
        assert ValidationOutcome.from_result(True) == ValidationOutcome(ok=True)

    def test_from_message(self):
        outcome = ValidationOutcome.from_result("The X field is required")
        assert not outcome.ok
        assert outcome.message == "The X field is required"

    @pytest.mark.parametrize("result", ["", False, None])
    def test_rejects_empty_failures(self, result):
        with pytest.raises(TypeError):
            ValidationOutcome.from_result(result)

    def test_invalid_needs_message(self):
        with pytest.raises(ValueError):
            ValidationOutcome.invalid("")


class TestValidationResult:
    def test_add_field_error(self):
        r = ValidationResult()
        r.add_field_error("username", "The Username field is required")
        assert not r.ok
        assert r.messages() == ["- The Username field is required"]

    def test_empty_message_ignored(self):
        r = ValidationResult()
        r.add_field_error("username", "")
        assert r.ok


class TestSettings:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for var in ("FORMFIELD_VALIDATION_MODE", "FORMFIELD_LOG_LEVEL", "FORMFIELD_THEME"):
            monkeypatch.delenv(var, raising=False)

    def test_defaults(self):
        s = Settings()
        assert (s.validation_mode, s.log_level, s.theme) == ("on_change", "WARNING", "outline")

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FORMFIELD_VALIDATION_MODE", "On_Blur")
        monkeypatch.setenv("FORMFIELD_LOG_LEVEL", "debug")
        monkeypatch.setenv("FORMFIELD_THEME", "plain")
        s = Settings()
        assert (s.validation_mode, s.log_level, s.theme) == ("on_blur", "DEBUG", "plain")

    def test_empty_variable_uses_default(self, monkeypatch):
        monkeypatch.setenv("FORMFIELD_LOG_LEVEL", "")
        assert Settings().log_level == "WARNING"

    def test_invalid_mode(self, monkeypatch):
        monkeypatch.setenv("FORMFIELD_VALIDATION_MODE", "eventually")
        with pytest.raises(ValidationError, match="validation_mode"):
            Settings()

    def test_invalid_log_level_rejected_at_load(self, monkeypatch):
        """Test a bad log level fails when settings are built, not in logging setup."""
        monkeypatch.setenv("FORMFIELD_LOG_LEVEL", "loud")
        with pytest.raises(ValidationError, match="log_level"):
            Settings()

    def test_invalid_theme(self):
        with pytest.raises(ValueError):
            Settings(theme="retro")

    def test_frozen(self):
        with pytest.raises(ValidationError):
            Settings().theme = "plain"
