"""
schema-engine — integration test package

File: tests/integration/__init__.py
Last updated: 2026-10-19

Purpose
- Package marker for end-to-end validation tests and their fixture loaders.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

FIXTURES_DIR = Path(__file__).resolve().parents[1] / "fixtures"


def load_fixture(name: str) -> Any:
    with (FIXTURES_DIR / name).open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


__all__ = ["FIXTURES_DIR", "load_fixture"]
