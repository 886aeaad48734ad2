from __future__ import annotations

from typing import Final, Literal, get_args

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Rule constants (locked).
PASSWORD_MIN_LENGTH: Final[int] = 8
OTP_LENGTH: Final[int] = 6
PHONE_MAX_LENGTH: Final[int] = 10
ALT_PHONE_MAX_LENGTH: Final[int] = 12
SPECIAL_CHARACTERS: Final[str] = "*|\":<>[]{}`\\()';@&$#!"

# The field every confirmPassword rule and strength tracker looks at.
PASSWORD_FIELD_NAME: Final[str] = "password"

ValidationMode = Literal["on_change", "on_blur", "on_submit"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Theme = Literal["outline", "plain"]

VALIDATION_MODES: Final[tuple[str, ...]] = get_args(ValidationMode)


class Settings(BaseSettings):
    """
    Runtime settings, read from FORMFIELD_* environment variables.

    - validation_mode: when the provider re-runs field rules.
    - log_level: level passed to logging.basicConfig by main().
    - theme: default theme for the demo window's inputs.
    """

    validation_mode: ValidationMode = "on_change"
    log_level: LogLevel = "WARNING"
    theme: Theme = "outline"

    model_config = SettingsConfigDict(
        env_prefix="FORMFIELD_",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("validation_mode", "theme", mode="before")
    @classmethod
    def normalize_lower(cls, v: object) -> str:
        return str(v).strip().lower()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_upper(cls, v: object) -> str:
        return str(v).strip().upper()
