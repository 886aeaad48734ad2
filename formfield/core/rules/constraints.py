from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from . import ValidationOutcome
from .composer import BoundValidator, compose_rules
from .registry import RuleName, ValidatorRegistry
from formfield.core.errors import InvalidPatternError


Number = Union[int, float]


@dataclass(frozen=True, slots=True)
class PatternConstraint:
    regex: re.Pattern[str]
    message: str


@dataclass(frozen=True, slots=True)
class NumericConstraint:
    value: Number
    message: str


@dataclass(frozen=True, slots=True)
class FieldConstraints:
    """
    Everything a field registers with the form state provider.

    Check order (and therefore which failure becomes FieldState.error):
    min, max, pattern, then named rules in declared order.
    """
    rules: Dict[RuleName, BoundValidator] = field(default_factory=dict)
    pattern: Optional[PatternConstraint] = None
    min: Optional[NumericConstraint] = None
    max: Optional[NumericConstraint] = None
    # Other fields whose value these rules read.
    depends_on: Tuple[str, ...] = ()

    def evaluate(self, value: Optional[str]) -> Dict[str, str]:
        """
        Run every check and return failing messages keyed by check name
        ("min", "max", "pattern", or the rule's public name).

        min/max/pattern are skipped for empty values; requiring a value is
        the `required` rule's job.
        """
        failures: Dict[str, str] = {}
        text = "" if value is None else str(value)

        if text != "":
            number = _to_float(text)
            if self.min is not None and number is not None and number < self.min.value:
                failures["min"] = self.min.message
            if self.max is not None and number is not None and number > self.max.value:
                failures["max"] = self.max.message
            if self.pattern is not None and self.pattern.regex.search(text) is None:
                failures["pattern"] = self.pattern.message

        for rule, validator in self.rules.items():
            outcome = ValidationOutcome.from_result(validator(value))
            if not outcome.ok:
                failures[rule.value] = outcome.message

        return failures


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    s = str(value).strip()
    if s == "":
        return None
    try:
        return float(s)
    except ValueError:
        return None


def compile_pattern(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def build_constraints(
    rules: Iterable[object],
    label: str,
    registry: ValidatorRegistry,
    *,
    pattern: Optional[str] = None,
    min_value: Optional[Number] = None,
    max_value: Optional[Number] = None,
    custom_error: Optional[str] = None,
) -> FieldConstraints:
    pattern_c = None
    if pattern:
        pattern_c = PatternConstraint(
            regex=compile_pattern(pattern),
            message=custom_error or f"The {label} field doesn't satisfy the regex {pattern}",
        )

    min_c = None
    if min_value is not None:
        min_c = NumericConstraint(
            value=min_value,
            message=f"The {label} field must be greater than or equal to {min_value}",
        )

    max_c = None
    if max_value is not None:
        max_c = NumericConstraint(
            value=max_value,
            message=f"The {label} field must be less than or equal to {max_value}",
        )

    composed = compose_rules(rules, label, registry)
    depends_on: Tuple[str, ...] = ()
    if RuleName.CONFIRM_PASSWORD in composed:
        depends_on = (registry.password_field,)

    return FieldConstraints(
        rules=composed,
        pattern=pattern_c,
        min=min_c,
        max=max_c,
        depends_on=depends_on,
    )
