"""``format`` keyword and its attribute checkers."""

from __future__ import annotations

import ipaddress
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Final
from urllib.parse import urlsplit

from schema_engine.keywords._common import expect_string, is_number
from schema_engine.report import LogLevel
from schema_engine.tree.node_type import NUMERIC_TYPES, NodeType

if TYPE_CHECKING:
    from schema_engine.context import ValidationContext
    from schema_engine.report import ListReport
    from schema_engine.tree.node_type import JSONValue

FormatCheck = Callable[[object], bool]

_LOGGER = logging.getLogger(__name__)

_DATE_TIME_LAYOUTS: Final[tuple[str, ...]] = ("%Y-%m-%dT%H:%M:%SZ", "%Y-%m-%dT%H:%M:%S.%fZ")
_HOST_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+$")
_PHONE = re.compile(r"^\+?[0-9][0-9 ().-]{4,}[0-9]$")
_HEX_COLOR = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
_STYLE_DECLARATION = re.compile(r"^\s*[A-Za-z-]+\s*:\s*[^;]+$")

# CSS 2.1 named colors.
_CSS_COLORS: Final[frozenset[str]] = frozenset(
    {
        "aqua", "black", "blue", "fuchsia", "gray", "green", "lime", "maroon",
        "navy", "olive", "orange", "purple", "red", "silver", "teal", "white", "yellow",
    }
)  # fmt: skip


def _layouts(*layouts: str) -> FormatCheck:
    def check(value: object) -> bool:
        for layout in layouts:
            try:
                datetime.strptime(str(value), layout)
            except ValueError:
                continue
            return True
        return False

    return check


def _utc_millisec(value: object) -> bool:
    return is_number(value) and value >= 0  # type: ignore[operator]


def _regex(value: object) -> bool:
    try:
        re.compile(str(value))
    except re.error:
        return False
    return True


def _color(value: object) -> bool:
    text = str(value)
    return text.lower() in _CSS_COLORS or _HEX_COLOR.match(text) is not None


def _style(value: object) -> bool:
    declarations = [part for part in str(value).split(";") if part.strip()]
    return bool(declarations) and all(_STYLE_DECLARATION.match(part) for part in declarations)


def _uri(value: object) -> bool:
    text = str(value)
    if not text or any(char.isspace() for char in text):
        return False
    try:
        parts = urlsplit(text)
    except ValueError:
        return False
    return bool(parts.scheme) and parts.scheme[0].isalpha()


def _ip_address(value: object) -> bool:
    try:
        ipaddress.IPv4Address(str(value))
    except ValueError:
        return False
    return True


def _ipv6(value: object) -> bool:
    try:
        ipaddress.IPv6Address(str(value))
    except ValueError:
        return False
    return True


def _host_name(value: object) -> bool:
    text = str(value)
    if not text or len(text) > 255:
        return False
    return all(_HOST_LABEL.match(label) for label in text.rstrip(".").split("."))


@dataclass(frozen=True, slots=True)
class FormatAttribute:
    check: FormatCheck
    types: frozenset[NodeType]


_STRING: Final[frozenset[NodeType]] = frozenset({NodeType.STRING})

FORMATS: Final[Mapping[str, FormatAttribute]] = {
    "date-time": FormatAttribute(_layouts(*_DATE_TIME_LAYOUTS), _STRING),
    "date": FormatAttribute(_layouts("%Y-%m-%d"), _STRING),
    "time": FormatAttribute(_layouts("%H:%M:%S"), _STRING),
    "utc-millisec": FormatAttribute(_utc_millisec, NUMERIC_TYPES),
    "regex": FormatAttribute(_regex, _STRING),
    "color": FormatAttribute(_color, _STRING),
    "style": FormatAttribute(_style, _STRING),
    "phone": FormatAttribute(lambda value: _PHONE.match(str(value)) is not None, _STRING),
    "uri": FormatAttribute(_uri, _STRING),
    "email": FormatAttribute(lambda value: _EMAIL.match(str(value)) is not None, _STRING),
    "ip-address": FormatAttribute(_ip_address, _STRING),
    "ipv6": FormatAttribute(_ipv6, _STRING),
    "host-name": FormatAttribute(_host_name, _STRING),
}


@dataclass(frozen=True, slots=True)
class FormatLogic:
    name: str
    attribute: FormatAttribute | None

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        if self.attribute is None:
            report.log(
                context.diagnostic(
                    f"format {self.name!r} is not supported, not checked",
                    keyword="format",
                    level=LogLevel.INFO,
                    format=self.name,
                )
            )
            return True
        if context.instance_type not in self.attribute.types:
            return True
        if self.attribute.check(context.instance):
            return True
        return context.fail(
            report,
            f"value is not a valid {self.name}",
            keyword="format",
            format=self.name,
        )


def build_format(context: ValidationContext, instance: JSONValue) -> FormatLogic:
    name = expect_string("format", context.schema_node["format"])
    attribute = FORMATS.get(name)
    if attribute is None:
        _LOGGER.debug("unknown format attribute", extra={"format": name})
    return FormatLogic(name, attribute)


__all__ = ["FORMATS", "FormatAttribute", "FormatCheck", "FormatLogic", "build_format"]
