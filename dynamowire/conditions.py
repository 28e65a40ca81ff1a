"""Range key conditions for Query.

Query narrows the items under one hash key with a condition on the range
key. Each condition class maps to one ComparisonOperator of the
RangeKeyCondition request field.

Example:
    table.query("user-123", range_key_condition=Between(10, 20))
    table.query("user-123", range_key_condition=BeginsWith("2024-"))
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from dynamowire.attributes import encode_attribute


class ComparisonOperator(str, Enum):
    EQ = "EQ"
    LE = "LE"
    LT = "LT"
    GE = "GE"
    GT = "GT"
    BEGINS_WITH = "BEGINS_WITH"
    BETWEEN = "BETWEEN"


@dataclass(frozen=True)
class RangeKeyCondition:
    """Base class for range key conditions."""

    operator: ComparisonOperator
    values: tuple[Any, ...]

    def to_wire(self, *, raw_binary: bool = False) -> dict[str, Any]:
        return {
            "AttributeValueList": [
                encode_attribute(value, raw_binary=raw_binary) for value in self.values
            ],
            "ComparisonOperator": self.operator.value,
        }


class _SingleValueCondition(RangeKeyCondition):
    operator_value: ComparisonOperator

    def __init__(self, value: Any) -> None:
        super().__init__(operator=self.operator_value, values=(value,))


class Eq(_SingleValueCondition):
    operator_value = ComparisonOperator.EQ


class Le(_SingleValueCondition):
    operator_value = ComparisonOperator.LE


class Lt(_SingleValueCondition):
    operator_value = ComparisonOperator.LT


class Ge(_SingleValueCondition):
    operator_value = ComparisonOperator.GE


class Gt(_SingleValueCondition):
    operator_value = ComparisonOperator.GT


class BeginsWith(_SingleValueCondition):
    """Range key starts with the given prefix (strings and binary only)."""

    operator_value = ComparisonOperator.BEGINS_WITH


class Between(RangeKeyCondition):
    """Range key lies between low and high, both inclusive."""

    def __init__(self, low: Any, high: Any) -> None:
        super().__init__(operator=ComparisonOperator.BETWEEN, values=(low, high))


__all__ = [
    "BeginsWith",
    "Between",
    "ComparisonOperator",
    "Eq",
    "Ge",
    "Gt",
    "Le",
    "Lt",
    "RangeKeyCondition",
]
