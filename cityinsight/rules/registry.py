from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from cityinsight.models.enums import RuleCategory

# Global registry -- maps rule_id -> RuleDefinition, in registration order
_REGISTRY: dict[str, RuleDefinition] = {}


@dataclass(frozen=True)
class RuleFiring:
    """Trace of one rule that produced output."""

    rule_id: str
    category: RuleCategory
    condition: str
    output: str
    inputs_used: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RuleDefinition:
    """A threshold rule in the catalog."""

    id: str
    category: RuleCategory
    description: str
    rule_fn: Callable[..., Optional[RuleFiring]]


def register_rule(rule_id: str, category: RuleCategory, description: str = "") -> Callable:
    """Decorator to register a rule function.

    The function receives ``(score_input, config)`` and returns a
    ``RuleFiring`` when it fires, else ``None``. Rules of a category are
    evaluated in the order they were registered.
    """

    def decorator(fn: Callable[..., Optional[RuleFiring]]) -> Callable[..., Optional[RuleFiring]]:
        if rule_id in _REGISTRY:
            raise ValueError(f"Rule already registered: {rule_id}")
        _REGISTRY[rule_id] = RuleDefinition(
            id=rule_id,
            category=category,
            description=description or (fn.__doc__ or "").strip(),
            rule_fn=fn,
        )
        return fn

    return decorator


def get_rule(rule_id: str) -> Optional[RuleDefinition]:
    return _REGISTRY.get(rule_id)


def get_rules(category: RuleCategory) -> list[RuleDefinition]:
    """Rules of one category, in evaluation order."""
    return [rule for rule in _REGISTRY.values() if rule.category == category]


def get_all_rules() -> dict[str, RuleDefinition]:
    """Return the full registry (read-only copy)."""
    return dict(_REGISTRY)
