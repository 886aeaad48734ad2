from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple, Union

from formfield.core.errors import ConstraintMisconfiguration
from formfield.core.rules import RuleName
from formfield.core.rules.constraints import compile_pattern


Number = Union[int, float]
ChangeHandler = Callable[[str], None]


def _noop(_value: str) -> None:
    return None


@dataclass(slots=True)
class FieldDescriptor:
    """
    Caller-supplied configuration for one FormInput.

    Defaults are resolved once here:
      - rules are converted to RuleName (unknown names raise UnknownRuleError)
      - pattern is compiled once to fail fast (InvalidPatternError)
      - on_change falls back to a no-op
      - resolved_label falls back to the field name
    """
    name: str
    label: Optional[str] = None
    rules: Sequence[Union[RuleName, str]] = ()
    input_type: str = "text"
    placeholder: str = ""
    field_id: Optional[str] = None
    on_change: Optional[ChangeHandler] = None
    pattern: Optional[str] = None
    min_value: Optional[Number] = None
    max_value: Optional[Number] = None
    autocomplete: str = "off"
    disabled: bool = False
    theme: str = "outline"
    focused: bool = False
    optional: bool = False
    class_name: str = ""
    show_password: bool = False
    padding_left: int = 0
    padding_right: int = 0
    custom_error: Optional[str] = None
    custom_message: Optional[str] = None
    hint: Optional[str] = None
    rule_names: Tuple[RuleName, ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        if not self.name:
            raise ConstraintMisconfiguration("A form field needs a non-empty name.")

        if isinstance(self.rules, str):
            raise ConstraintMisconfiguration(
                f"rules for field {self.name!r} must be a list of rule names, not a string."
            )
        self.rule_names = tuple(RuleName.coerce(r) for r in self.rules)

        if self.pattern:
            compile_pattern(self.pattern)

        if self.on_change is None:
            self.on_change = _noop

        self.input_type = (self.input_type or "text").strip().lower()

    @property
    def resolved_label(self) -> str:
        return self.label or self.name

    @property
    def is_password(self) -> bool:
        return self.input_type == "password"

    def has_rule(self, rule: Union[RuleName, str]) -> bool:
        return RuleName.coerce(rule) in self.rule_names
