from __future__ import annotations


class ConstraintMisconfiguration(Exception):
    """
    Programming error in a field configuration.

    Raised at configuration time, never while the user is typing.
    """


class UnknownRuleError(ConstraintMisconfiguration, ValueError):
    def __init__(self, rule: object) -> None:
        super().__init__(f"Unknown validation rule: {rule!r}")
        self.rule = rule


class InvalidPatternError(ConstraintMisconfiguration, ValueError):
    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class DuplicateFieldError(ConstraintMisconfiguration):
    def __init__(self, name: str) -> None:
        super().__init__(f"Field {name!r} is already registered in this form.")
        self.name = name


class UnknownFieldError(ConstraintMisconfiguration, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Field {name!r} is not registered in this form.")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])
