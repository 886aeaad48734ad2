from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from formfield.core.password_strength import PasswordStrengthState


class MessageKind(str, Enum):
    STRENGTH = "strength"
    ERROR = "error"
    SUCCESS = "success"
    HINT = "hint"


@dataclass(frozen=True, slots=True)
class DisplayMessage:
    kind: MessageKind
    text: str = ""
    strength: Optional[PasswordStrengthState] = None


def select_display_message(
    *,
    has_password_rule: bool,
    strength_dirty: bool,
    strength: PasswordStrengthState,
    error: Optional[str] = None,
    custom_error: Optional[str] = None,
    custom_message: Optional[str] = None,
    hint: Optional[str] = None,
) -> Optional[DisplayMessage]:
    """
    Pick the single message shown under a field.

    Precedence:
      1. password rule: strength breakdown once dirty; plain errors never shown
      2. custom_error, else registry error
      3. custom_message
      4. hint, only while no error is active
    """
    error_active = bool(custom_error or error)

    if has_password_rule and strength_dirty:
        return DisplayMessage(kind=MessageKind.STRENGTH, strength=strength)

    if error_active and not has_password_rule:
        return DisplayMessage(kind=MessageKind.ERROR, text=custom_error or error or "")

    if custom_message:
        return DisplayMessage(kind=MessageKind.SUCCESS, text=custom_message)

    if hint and not error_active:
        return DisplayMessage(kind=MessageKind.HINT, text=hint)

    return None
