"""
Rule type registry: type id -> RuleType instance.

Built-in rule types register themselves on import of
`monorepolint.rules`. Configuration refers to rule types by id.
"""

from __future__ import annotations

from typing import Iterable, TypeVar

from .base import RuleType

R = TypeVar("R", bound=type[RuleType])


class RuleTypeRegistry:
    def __init__(self):
        self._rule_types: dict[str, RuleType] = {}

    def register(self, rule_type: RuleType) -> None:
        type_id = getattr(rule_type, "type_id", None)
        if not type_id:
            raise ValueError("Rule type missing type_id")
        if type_id in self._rule_types:
            raise ValueError(f"Duplicate rule type registered: {type_id}")
        self._rule_types[type_id] = rule_type

    def get(self, type_id: str) -> RuleType | None:
        return self._rule_types.get(type_id)

    def ids(self) -> Iterable[str]:
        return self._rule_types.keys()

    def all(self) -> list[RuleType]:
        return list(self._rule_types.values())


registry = RuleTypeRegistry()


def register_rule_type(rule_cls: R) -> R:
    """Class decorator: instantiate and register a rule type."""
    registry.register(rule_cls())
    return rule_cls
