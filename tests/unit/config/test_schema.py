"""
schema-engine — unit tests for config schema validation

File: tests/unit/config/test_schema.py
Last updated: 2026-10-19

Purpose
- Validate strict config schema behavior, structured errors, version guidance and merging.

What this test file should cover
- Defaults validate successfully.
- Unknown keys, missing sections and invalid types are rejected with dotted paths.
- Merging is deterministic and non-destructive.

Non-functional requirements
- Deterministic and fast.
"""

from __future__ import annotations

import pytest

from schema_engine.config.schema import (
    ConfigSchemaVersion,
    ConfigValidationError,
    ConfigValidationIssue,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)


def test_default_config_validates_successfully() -> None:
    result = validate_config(default_config())

    assert result.is_valid
    assert result.config is not None
    assert result.config["meta"]["schema_version"] == ConfigSchemaVersion


def test_unknown_key_rejection_is_explicit() -> None:
    config = default_config()
    config["engine"]["threads"] = 4  # type: ignore[typeddict-unknown-key]

    result = validate_config(config)

    assert not result.is_valid
    assert result.issues == (
        ConfigValidationIssue("engine", "additional properties are not allowed: threads"),
    )


def test_unknown_section_is_reported_at_root() -> None:
    config = {**default_config(), "plugins": {}}
    issues = validate_config(config).issues
    assert [issue.path for issue in issues] == ["<root>"]


def test_missing_sections_and_keys_are_reported() -> None:
    config = default_config()
    del config["observability"]  # type: ignore[misc]
    del config["engine"]["max_workers"]  # type: ignore[misc]

    messages = {issue.path: issue.message for issue in validate_config(config).issues}

    assert messages == {
        "<root>": "required properties are missing: observability",
        "engine": "required properties are missing: max_workers",
    }


@pytest.mark.parametrize(
    ("section", "key", "value", "fragment"),
    [
        ("engine", "max_workers", "three", "not allowed (allowed: integer)"),
        ("engine", "max_workers", 0, "lower than the required minimum 1"),
        ("engine", "max_workers", 10_000, "greater than the required maximum 256"),
        ("engine", "suppress_repeated_schema_faults", 1, "not allowed (allowed: boolean)"),
        ("engine", "report_log_level", "LOUD", "not one of the enumerated values"),
        ("observability", "log_format", "xml", "not one of the enumerated values"),
        ("observability", "log_to_stderr", "yes", "not allowed (allowed: boolean)"),
    ],
)
def test_type_and_range_violations_report_structured_paths(
    section: str, key: str, value: object, fragment: str
) -> None:
    config = default_config()
    config[section][key] = value  # type: ignore[literal-required]

    result = validate_config(config)

    assert not result.is_valid
    messages = {issue.path: issue.message for issue in result.issues}
    assert fragment in messages[f"{section}.{key}"]


def test_non_mapping_payload_is_rejected() -> None:
    result = validate_config(["not", "a", "table"])
    assert result.issues == (ConfigValidationIssue("<root>", "expected object, got list"),)


def test_version_mismatch_includes_migration_guidance() -> None:
    config = default_config()
    config["meta"]["schema_version"] = ConfigSchemaVersion + 1

    issues = validate_config(config).issues

    assert len(issues) == 1
    assert issues[0].path == "meta.schema_version"
    assert "upgrade the schema-engine runtime" in issues[0].message
    assert "current" in migration_guidance(ConfigSchemaVersion)
    assert "older" in migration_guidance(0)


def test_assert_valid_config_raises_with_every_issue() -> None:
    config = default_config()
    config["engine"]["max_workers"] = 0
    config["observability"]["log_level"] = "LOUD"  # type: ignore[typeddict-item]

    with pytest.raises(ConfigValidationError) as excinfo:
        assert_valid_config(config)

    assert [issue.path for issue in excinfo.value.issues] == [
        "engine.max_workers",
        "observability.log_level",
    ]
    assert "- engine.max_workers:" in str(excinfo.value)


def test_merge_config_is_deep_and_does_not_mutate_inputs() -> None:
    base = default_config()
    overlay = {"engine": {"max_workers": 5}, "observability": {"log_format": "text"}}

    merged = merge_config(base, overlay)

    assert merged["engine"]["max_workers"] == 5
    assert merged["engine"]["parallel_min_children"] == base["engine"]["parallel_min_children"]
    assert merged["observability"]["log_format"] == "text"
    assert base["engine"]["max_workers"] == 1
    assert overlay == {"engine": {"max_workers": 5}, "observability": {"log_format": "text"}}
