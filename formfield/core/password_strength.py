from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, List, Optional, Tuple

from formfield.config import PASSWORD_MIN_LENGTH, SPECIAL_CHARACTERS


_UPPERCASE: Final[re.Pattern[str]] = re.compile(r"[A-Z]")
_LOWERCASE: Final[re.Pattern[str]] = re.compile(r"[a-z]")
_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9]")
_SPECIAL: Final[re.Pattern[str]] = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")


@dataclass(frozen=True, slots=True)
class PasswordStrengthState:
    """
    Five independent strength checks for one password value.

    Display-only: the pass/fail of the `password` rule is computed separately
    by the validator registry from the same predicates.
    """
    has_uppercase: bool = False
    has_lowercase: bool = False
    has_digit: bool = False
    has_special: bool = False
    has_min_length: bool = False

    @property
    def is_strong(self) -> bool:
        return all(ok for _key, ok in self.items())

    def items(self) -> Tuple[Tuple[str, bool], ...]:
        return (
            ("uppercase", self.has_uppercase),
            ("lowercase", self.has_lowercase),
            ("number", self.has_digit),
            ("special", self.has_special),
            ("length", self.has_min_length),
        )


# Wording used by the password rule for each missing category, in fixed order.
# "digits" for the length item is kept as-is for compatibility.
REQUIREMENT_PHRASES: Final[Tuple[Tuple[str, str], ...]] = (
    ("uppercase", "an uppercase letter"),
    ("lowercase", "a lowercase letter"),
    ("number", "a number"),
    ("special", "a special character"),
    ("length", f"at least {PASSWORD_MIN_LENGTH} digits"),
)

# Wording used by the breakdown shown under a password field.
BREAKDOWN_LABELS: Final[Tuple[Tuple[str, str], ...]] = (
    ("uppercase", "Must contain an uppercase letter"),
    ("lowercase", "Must contain a lowercase letter"),
    ("number", "Must contain a number"),
    ("special", "Must contain a special character"),
    ("length", f"Must contain at least {PASSWORD_MIN_LENGTH} characters"),
)


def compute_strength(value: Optional[str]) -> PasswordStrengthState:
    """
    Pure function of the current password value. None is treated as empty.
    """
    s = "" if value is None else str(value)
    return PasswordStrengthState(
        has_uppercase=_UPPERCASE.search(s) is not None,
        has_lowercase=_LOWERCASE.search(s) is not None,
        has_digit=_DIGIT.search(s) is not None,
        has_special=_SPECIAL.search(s) is not None,
        has_min_length=len(s) >= PASSWORD_MIN_LENGTH,
    )


def missing_requirements(state: PasswordStrengthState) -> List[str]:
    checks = dict(state.items())
    return [phrase for key, phrase in REQUIREMENT_PHRASES if not checks[key]]


def join_requirements(phrases: List[str]) -> str:
    """
    ["a", "b", "c"] -> "a, b and c"
    """
    if len(phrases) > 1:
        return f"{', '.join(phrases[:-1])} and {phrases[-1]}"
    return ", ".join(phrases)
