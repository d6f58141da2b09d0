"""Numeric keywords: ``minimum``, ``maximum`` and ``divisibleBy``."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import TYPE_CHECKING

from schema_engine.keywords._common import (
    Number,
    expect_bool,
    expect_number,
    reject,
    to_decimal,
)
from schema_engine.tree.node_type import JSONValue

if TYPE_CHECKING:
    from schema_engine.context import ValidationContext
    from schema_engine.report import ListReport


@dataclass(frozen=True, slots=True)
class BoundLogic:
    """Inclusive or exclusive lower/upper bound."""

    keyword: str
    limit: Number
    exclusive: bool
    lower: bool

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        value = context.instance
        found = to_decimal(value)  # type: ignore[arg-type]
        limit = to_decimal(self.limit)
        if self.lower:
            ok = found > limit if self.exclusive else found >= limit
        else:
            ok = found < limit if self.exclusive else found <= limit
        if ok:
            return True

        if self.lower:
            relation = "not greater than" if self.exclusive else "lower than"
        else:
            relation = "not lower than" if self.exclusive else "greater than"
        return context.fail(
            report,
            f"number {value} is {relation} the required {self.keyword} {self.limit}",
            keyword=self.keyword,
            found=value,
            limit=self.limit,
            exclusive=self.exclusive,
        )


@dataclass(frozen=True, slots=True)
class DivisibleByLogic:
    divisor: Number

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        value = context.instance
        # exact for any magnitude
        dividend = Fraction(to_decimal(value))  # type: ignore[arg-type]
        if dividend % Fraction(to_decimal(self.divisor)) == 0:
            return True
        return context.fail(
            report,
            f"number {value} is not a multiple of {self.divisor}",
            keyword="divisibleBy",
            found=value,
            divisor=self.divisor,
        )


def build_minimum(context: ValidationContext, instance: JSONValue) -> BoundLogic:
    schema = context.schema_node
    return BoundLogic(
        keyword="minimum",
        limit=expect_number("minimum", schema["minimum"]),
        exclusive=expect_bool("exclusiveMinimum", schema.get("exclusiveMinimum", False)),
        lower=True,
    )


def build_maximum(context: ValidationContext, instance: JSONValue) -> BoundLogic:
    schema = context.schema_node
    return BoundLogic(
        keyword="maximum",
        limit=expect_number("maximum", schema["maximum"]),
        exclusive=expect_bool("exclusiveMaximum", schema.get("exclusiveMaximum", False)),
        lower=False,
    )


def build_divisible_by(context: ValidationContext, instance: JSONValue) -> DivisibleByLogic:
    divisor = expect_number("divisibleBy", context.schema_node["divisibleBy"])
    if divisor <= 0:
        reject("divisibleBy", f"divisor must be strictly positive, got {divisor}")
    return DivisibleByLogic(divisor)


__all__ = [
    "BoundLogic",
    "DivisibleByLogic",
    "build_divisible_by",
    "build_maximum",
    "build_minimum",
]
