"""Schema: the ordered property rules that govern one object type."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from activity_streams.rules import Predicate, PropertyRule


def always_valid(_value: Any) -> bool:
    """Default missing-property check: accept any value."""
    return True


@dataclass(frozen=True, eq=False)
class Schema:
    """Rules for one object type, addressable by assignment or wire name."""

    type_tag: str | None
    rules: Mapping[str, PropertyRule] = field(default_factory=dict)
    missing_check: Predicate = always_valid
    _index: Mapping[str, PropertyRule] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        rules = MappingProxyType(dict(self.rules))
        index: dict[str, PropertyRule] = {}
        for rule in rules.values():
            index[rule.name] = rule
        # Wire names resolve too, but never shadow an assignment name.
        for rule in rules.values():
            index.setdefault(rule.wire_name, rule)
        object.__setattr__(self, "rules", rules)
        object.__setattr__(self, "_index", MappingProxyType(index))

    @classmethod
    def from_rules(
        cls,
        type_tag: str | None,
        rules: Iterable[PropertyRule],
        *,
        missing_check: Predicate = always_valid,
    ) -> Schema:
        """Build a schema from rules in declaration order (later names win)."""
        return cls(
            type_tag=type_tag,
            rules={rule.name: rule for rule in rules},
            missing_check=missing_check,
        )

    def rule_for(self, name: str) -> PropertyRule | None:
        """Return the rule for an assignment or wire name, if any."""
        return self._index.get(name)

    def wire_name(self, name: str) -> str:
        """Resolve the serialized key for a name (the name itself if unknown)."""
        rule = self.rule_for(name)
        return rule.wire_name if rule is not None else name

    def names(self) -> list[str]:
        """Assignment names in declaration order."""
        return list(self.rules)

    def extend(
        self,
        *rules: PropertyRule,
        type_tag: str | None = None,
        missing_check: Predicate | None = None,
    ) -> Schema:
        """Return a derived schema with added or overridden rules.

        Args:
            *rules: Rules to add; a rule with an existing name replaces it.
            type_tag: Tag of the derived schema (defaults to this schema's tag).
            missing_check: Replacement missing-property check.

        Returns:
            New Schema; this one is unchanged.
        """
        merged = dict(self.rules)
        for rule in rules:
            merged[rule.name] = rule
        return Schema(
            type_tag=type_tag if type_tag is not None else self.type_tag,
            rules=merged,
            missing_check=missing_check or self.missing_check,
        )

    def retagged(self, type_tag: str | None) -> Schema:
        """Return the same rules under another type tag."""
        return Schema(
            type_tag=type_tag, rules=self.rules, missing_check=self.missing_check
        )


def compose(
    *schemas: Schema,
    type_tag: str | None = None,
    missing_check: Predicate | None = None,
) -> Schema:
    """Merge rule sets; later schemas override earlier ones by rule name.

    Args:
        *schemas: Schemas in precedence order (last wins).
        type_tag: Tag of the composed schema (defaults to the last schema's tag).
        missing_check: Missing-property check (defaults to the last schema's).

    Returns:
        The composed Schema.
    """
    if not schemas:
        return Schema(type_tag=type_tag, missing_check=missing_check or always_valid)
    merged: dict[str, PropertyRule] = {}
    for schema in schemas:
        merged.update(schema.rules)
    last = schemas[-1]
    return Schema(
        type_tag=type_tag if type_tag is not None else last.type_tag,
        rules=merged,
        missing_check=missing_check or last.missing_check,
    )
