"""String keywords: ``minLength``, ``maxLength`` and ``pattern``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from schema_engine.keywords._common import expect_count, expect_string, reject

if TYPE_CHECKING:
    from schema_engine.context import ValidationContext
    from schema_engine.report import ListReport
    from schema_engine.tree.node_type import JSONValue


@dataclass(frozen=True, slots=True)
class LengthLogic:
    keyword: str
    limit: int
    lower: bool

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        length = len(str(context.instance))
        if (length >= self.limit) if self.lower else (length <= self.limit):
            return True
        relation = "shorter" if self.lower else "longer"
        bound = "minimum" if self.lower else "maximum"
        return context.fail(
            report,
            f"string is {relation} than the {bound} length {self.limit} (found {length})",
            keyword=self.keyword,
            found=length,
            limit=self.limit,
        )


@dataclass(frozen=True, slots=True)
class PatternLogic:
    regex: re.Pattern[str]

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        if self.regex.search(str(context.instance)):
            return True
        return context.fail(
            report,
            f"string does not match pattern {self.regex.pattern!r}",
            keyword="pattern",
            pattern=self.regex.pattern,
        )


def build_min_length(context: ValidationContext, instance: JSONValue) -> LengthLogic:
    limit = expect_count("minLength", context.schema_node["minLength"])
    return LengthLogic("minLength", limit, True)


def build_max_length(context: ValidationContext, instance: JSONValue) -> LengthLogic:
    limit = expect_count("maxLength", context.schema_node["maxLength"])
    return LengthLogic("maxLength", limit, False)


def build_pattern(context: ValidationContext, instance: JSONValue) -> PatternLogic:
    source = expect_string("pattern", context.schema_node["pattern"])
    try:
        return PatternLogic(re.compile(source))
    except re.error as exc:
        reject("pattern", f"invalid regular expression {source!r}: {exc}")


__all__ = [
    "LengthLogic",
    "PatternLogic",
    "build_max_length",
    "build_min_length",
    "build_pattern",
]
