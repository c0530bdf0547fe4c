"""
Boolean rule objects that scalar schemas assemble their built-in predicate from.
"""
from typing import Any, Iterable, Optional
from .type_checking import ValueKind, classify


class Predicate:
    """Base rule: accepts everything."""

    def first_failure(self, value: Any) -> Optional[str]:
        """Return why value fails this rule, or None if it passes."""
        return None

    def __call__(self, value: Any) -> bool:
        """Allow a rule to be used wherever a plain predicate is expected."""
        return self.first_failure(value) is None


class TruthyPredicate(Predicate):
    """Accepts truthy values."""

    def first_failure(self, value: Any) -> Optional[str]:
        if not value:
            return f"{value!r} is not truthy"
        return None


class KindPredicate(Predicate):
    """Accepts values that classify as the expected kind."""

    def __init__(self, kind: ValueKind):
        self.kind = kind

    def first_failure(self, value: Any) -> Optional[str]:
        actual = classify(value)
        if actual is not self.kind:
            return f"expected {self.kind.value}, got {actual.value}"
        return None


class BoundsPredicate(Predicate):
    """Accepts numbers within [min_value, max_value], inclusive."""

    def __init__(self, min_value: float, max_value: float):
        self.min_value = min_value
        self.max_value = max_value

    def first_failure(self, value: Any) -> Optional[str]:
        if value < self.min_value:
            return f"must be >= {self.min_value}, got {value}"
        if value > self.max_value:
            return f"must be <= {self.max_value}, got {value}"
        # NaN compares false against both bounds
        if not self.min_value <= value <= self.max_value:
            return f"must lie in [{self.min_value}, {self.max_value}], got {value}"
        return None


class MembershipPredicate(Predicate):
    """Accepts values contained in an allowed collection."""

    def __init__(self, choices: Iterable[Any]):
        self.choices = list(choices)

    def first_failure(self, value: Any) -> Optional[str]:
        if value not in self.choices:
            return f"must be one of {self.choices}, got {value!r}"
        return None


class CompositePredicate(Predicate):
    """Applies several rules in order, stopping at the first failure."""

    def __init__(self, *rules: Predicate):
        self.rules = rules

    def first_failure(self, value: Any) -> Optional[str]:
        for rule in self.rules:
            reason = rule.first_failure(value)
            if reason is not None:
                return reason
        return None


class EachPredicate(Predicate):
    """Accepts arrays whose every element passes the item rule."""

    def __init__(self, item_rule: Predicate):
        self.item_rule = item_rule
        self._array_rule = KindPredicate(ValueKind.ARRAY)

    def first_failure(self, value: Any) -> Optional[str]:
        reason = self._array_rule.first_failure(value)
        if reason is not None:
            return reason
        for index, item in enumerate(value):
            reason = self.item_rule.first_failure(item)
            if reason is not None:
                return f"[{index}]: {reason}"
        return None
