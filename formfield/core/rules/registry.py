from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Dict, Final, Optional, Protocol

from . import RuleResult
from formfield.config import (
    ALT_PHONE_MAX_LENGTH,
    OTP_LENGTH,
    PASSWORD_FIELD_NAME,
    PHONE_MAX_LENGTH,
)
from formfield.core.errors import UnknownRuleError
from formfield.core.password_strength import compute_strength, join_requirements, missing_requirements


Validator = Callable[[Optional[str], str], RuleResult]


class RuleName(str, Enum):
    """
    Closed set of rule names a field may request.
    Values are the public (camelCase) names used in field configuration.
    """
    REQUIRED = "required"
    EMAIL = "email"
    PHONE = "phone"
    ALT_PHONE = "altPhone"
    PASSWORD = "password"
    OTP = "otp"
    CONFIRM_PASSWORD = "confirmPassword"
    NO_SPACES = "noSpaces"

    @classmethod
    def coerce(cls, value: object) -> "RuleName":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownRuleError(value) from None


class FieldValueReader(Protocol):
    """Read access to the live value of another field in the same form."""

    def watch(self, name: str) -> Optional[str]:
        ...


# local-part (dot-atoms or quoted) @ (IPv4 literal | labels + alphabetic TLD)
_EMAIL: Final[re.Pattern[str]] = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))"
)


def _text(value: Optional[str]) -> str:
    return "" if value is None else str(value)


def required(value: Optional[str], label: str = "") -> RuleResult:
    if value is not None and value != "":
        return True
    return f"The {label} field is required"


def email(value: Optional[str], label: str = "") -> RuleResult:
    if _EMAIL.fullmatch(_text(value)):
        return True
    return f"The {label} field has to be a valid email"


def phone(value: Optional[str], label: str = "") -> RuleResult:
    # Length-only check. The message says 12 for both phone rules; kept as shipped.
    if len(_text(value)) <= PHONE_MAX_LENGTH:
        return True
    return f"The {label} field must be less than or equal to {ALT_PHONE_MAX_LENGTH} digits"


def alt_phone(value: Optional[str], label: str = "") -> RuleResult:
    if len(_text(value)) <= ALT_PHONE_MAX_LENGTH:
        return True
    return f"The {label} field must be less than or equal to {ALT_PHONE_MAX_LENGTH} digits"


def password(value: Optional[str], label: str = "") -> RuleResult:
    missing = missing_requirements(compute_strength(value))
    if not missing:
        return True
    return f"The {label} field must have {join_requirements(missing)}"


def otp(value: Optional[str], label: str = "") -> RuleResult:
    if len(_text(value)) == OTP_LENGTH:
        return True
    return f"The {label} field must be of length {OTP_LENGTH}"


def no_spaces(value: Optional[str], label: str = "") -> RuleResult:
    if " " not in _text(value):
        return True
    return f"The {label} field is not allowed to contain spaces"


class ValidatorRegistry:
    """
    One validator per RuleName.

    All validators are pure except confirmPassword, which reads the live
    value of the password field through the injected FieldValueReader.
    Without a reader the password value is None and confirmPassword fails
    with its normal message.
    """

    def __init__(
        self,
        reader: Optional[FieldValueReader] = None,
        *,
        password_field: str = PASSWORD_FIELD_NAME,
    ) -> None:
        self._reader = reader
        self._password_field = password_field
        self._validators: Dict[RuleName, Validator] = {
            RuleName.REQUIRED: required,
            RuleName.EMAIL: email,
            RuleName.PHONE: phone,
            RuleName.ALT_PHONE: alt_phone,
            RuleName.PASSWORD: password,
            RuleName.OTP: otp,
            RuleName.CONFIRM_PASSWORD: self._confirm_password,
            RuleName.NO_SPACES: no_spaces,
        }

    @property
    def password_field(self) -> str:
        return self._password_field

    def validator_for(self, rule: object) -> Validator:
        return self._validators[RuleName.coerce(rule)]

    def validate(self, rule: object, value: Optional[str], label: str = "") -> RuleResult:
        return self.validator_for(rule)(value, label)

    def _confirm_password(self, value: Optional[str], label: str = "") -> RuleResult:
        current = self._reader.watch(self._password_field) if self._reader is not None else None
        if value == current:
            return True
        return f"The {label} field must be equal to the Password field"
