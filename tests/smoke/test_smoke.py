"""
schema-engine — end-to-end smoke test

File: tests/smoke/test_smoke.py
Last updated: 2026-10-19

Purpose
- Load a TOML config, set up logging from it, register a custom keyword on a private
  registry and validate a realistic document end to end.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from schema_engine import KeywordRegistry, Validator
from schema_engine.config import load_config
from schema_engine.keywords import register_builtin_keywords
from schema_engine.observability import LoggingConfig, setup_logging, shutdown_logging

_ORDER_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "required": True, "pattern": "^ord-[0-9]+$"},
        "placed": {"type": "string", "format": "date-time", "required": True},
        "lines": {
            "type": "array",
            "minItems": 1,
            "items": {"$ref": "#/definitions/line"},
        },
        "currency": {"enum": ["EUR", "USD"], "x-upper": True},
    },
    "additionalProperties": False,
    "definitions": {
        "line": {
            "type": "object",
            "properties": {
                "sku": {"type": "string", "required": True},
                "qty": {"type": "integer", "minimum": 1, "required": True},
                "price": {"type": "number", "minimum": 0, "divisibleBy": 0.01},
            },
        }
    },
}


class _UpperLogic:
    def evaluate(self, context, report):  # type: ignore[no-untyped-def]
        value = context.instance
        if value == value.upper():
            return True
        return context.fail(report, f"{value!r} is not upper case", keyword="x-upper")


@pytest.mark.smoke
def test_end_to_end_validation_with_config_and_logging(tmp_path: Path) -> None:
    config_path = tmp_path / "schema_engine.toml"
    config_path.write_text(
        """
[engine]
max_workers = 2
parallel_min_children = 2

[observability]
log_level = "WARNING"
log_file = "logs/engine.jsonl"
log_to_stderr = false
""".strip(),
        encoding="utf-8",
    )
    config = load_config(config_path, environ={})
    handle = setup_logging(LoggingConfig.from_config(config))

    registry = register_builtin_keywords(KeywordRegistry())
    registry.register("x-upper", ["string"], lambda context, instance: _UpperLogic())
    validator = Validator.from_config(_ORDER_SCHEMA, config, registry=registry)

    good = {
        "id": "ord-1",
        "placed": "2026-10-19T08:00:00Z",
        "lines": [{"sku": "A", "qty": 2, "price": 9.99}, {"sku": "B", "qty": 1}],
        "currency": "EUR",
    }
    bad = {
        "id": "order-1",
        "placed": "yesterday",
        "lines": [{"sku": "A", "qty": 0}, {"qty": 1, "price": 1.005}],
        "currency": "eur",
        "note": "x",
    }

    ok_result = validator.validate(good)
    bad_result = validator.validate(bad)
    shutdown_logging(handle)
    logging_config = LoggingConfig.from_config(config)

    assert ok_result.valid is True
    assert len(ok_result.report) == 0

    assert bad_result.valid is False
    assert [(str(item.path), item.keyword) for item in bad_result.report] == [
        ("", "additionalProperties"),
        ("/id", "pattern"),
        ("/placed", "format"),
        ("/lines/0/qty", "minimum"),
        ("/lines/1", "properties"),
        ("/lines/1/price", "divisibleBy"),
        ("/currency", "enum"),
        ("/currency", "x-upper"),
    ]
    assert json.loads(json.dumps(bad_result.report.to_dicts()))[0]["level"] == "error"
    assert logging_config.log_file == (tmp_path.resolve() / "logs" / "engine.jsonl").as_posix()
    assert Path(str(logging_config.log_file)).exists()
