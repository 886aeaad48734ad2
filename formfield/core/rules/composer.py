from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Optional

from . import RuleResult
from .registry import RuleName, ValidatorRegistry


logger = logging.getLogger(__name__)

BoundValidator = Callable[[Optional[str]], RuleResult]


def compose_rules(
    rules: Iterable[object],
    label: str,
    registry: ValidatorRegistry,
) -> Dict[RuleName, BoundValidator]:
    """
    Bind each requested rule to the field's label.

    - Keys keep the requested order; duplicates collapse to one entry.
    - Unknown names raise UnknownRuleError here, not at validation time.
    """
    composed: Dict[RuleName, BoundValidator] = {}
    for raw in rules:
        rule = RuleName.coerce(raw)
        if rule in composed:
            logger.warning("Rule %r requested twice for field %r; keeping one.", rule.value, label)
            continue
        composed[rule] = _bind(registry, rule, label)

    logger.debug("Composed rules for %r: %s", label, [r.value for r in composed])
    return composed


def _bind(registry: ValidatorRegistry, rule: RuleName, label: str) -> BoundValidator:
    validator = registry.validator_for(rule)

    def bound(value: Optional[str]) -> RuleResult:
        return validator(value, label)

    bound.__name__ = f"{rule.value}_validator"
    return bound
