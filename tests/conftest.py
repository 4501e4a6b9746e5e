"""
Pytest configuration and shared fixtures for shapecheck tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Ensure src and tests directories are in path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from shapecheck.config import ENV_MAPPING
from shapecheck.types import ValidatorType
from shapecheck.types import registry as type_registry


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep SHAPECHECK_* variables from the developer shell out of tests."""
    for env_var in ENV_MAPPING:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture(autouse=True)
def restore_type_registry():
    """Undo types registered by a test."""
    saved = dict(type_registry._TYPE_REGISTRY)
    yield
    type_registry._TYPE_REGISTRY.clear()
    type_registry._TYPE_REGISTRY.update(saved)


class RecordingType(ValidatorType):
    """Accepts everything and remembers which values it was asked about."""

    def __init__(self, options=None):
        super().__init__(options)
        self.seen = []

    def validate(self, value):
        self.seen.append(value)
        return self.options.get("result", True)


@pytest.fixture
def recording_type():
    return RecordingType()


@pytest.fixture
def user_schema():
    """Mapping schema used across several test modules."""
    return {
        "default": {
            "validator": "object",
            "invalid": "unexpected fields",
            "properties": {
                "name": {
                    "validator": "string",
                    "options": {"min_length": 1},
                    "required": "name required",
                    "invalid": "name invalid",
                },
                "email": {
                    "validator": "email",
                    "required": "email required",
                    "invalid": "email invalid",
                },
                "age": {
                    "validator": "integer",
                    "options": {"min": 0, "max": 150},
                    "invalid": "age invalid",
                },
            },
        }
    }
