from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union


# What a single rule returns: True on success, a non-empty message on failure.
RuleResult = Union[bool, str]


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """
    Outcome of one rule for one value.

    - ok: True for Valid.
    - message: failure text for Invalid (never empty), "" for Valid.
    """
    ok: bool = True
    message: str = ""

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return cls(ok=True)

    @classmethod
    def invalid(cls, message: str) -> "ValidationOutcome":
        if not message:
            raise ValueError("An invalid outcome needs a non-empty message.")
        return cls(ok=False, message=message)

    @classmethod
    def from_result(cls, result: RuleResult) -> "ValidationOutcome":
        if result is True:
            return cls.valid()
        if isinstance(result, str) and result:
            return cls.invalid(result)
        raise TypeError(f"Rule returned {result!r}; expected True or a non-empty message.")


@dataclass(slots=True)
class ValidationResult:
    """
    Form-level aggregate produced by FormStateProvider.validate_all().

    - ok: Blocking status. If False, the caller must not submit.
    - field_errors: first failing message per field, in registration order.
    """
    ok: bool = True
    field_errors: Dict[str, str] = field(default_factory=dict)

    def add_field_error(self, field_name: str, message: str) -> None:
        if field_name and message:
            self.field_errors[field_name] = message
            self.ok = False

    def messages(self) -> List[str]:
        return [f"- {msg}" for msg in self.field_errors.values()]


from .registry import FieldValueReader, RuleName, ValidatorRegistry
from .composer import compose_rules
from .constraints import FieldConstraints, build_constraints
