"""
Tests for schema document linting.
"""

import pytest

from shapecheck.meta_schema import lint_schema_document


class TestLintValidDocuments:

    @pytest.mark.parametrize("document", [
        {"validator": "string"},
        {
            "default": {"validator": "array", "items": "tag", "max_items": 3},
            "tag": {"validator": "string", "options": {"max_length": 8}},
        },
        {
            "settings": {"mode": "cleanup", "fail_early": True, "max_depth": 4},
            "schemas": {
                "default": {
                    "validator": "object",
                    "keyrename": {"mail": "email"},
                    "properties": {
                        "email": {"validator": "email", "required": "email required"},
                        "check": {"validator": "callback", "callback": "pkg.mod:check"},
                        "steps": {"validator": "chain", "chain": [{"validator": "string"}]},
                    },
                },
            },
        },
    ])
    def test_no_problems(self, document):
        assert lint_schema_document(document) == []


class TestLintProblems:

    def test_unknown_attribute(self):
        problems = lint_schema_document({"default": {"validator": "string", "requird": "x"}})
        assert len(problems) == 1

    def test_object_without_properties(self):
        assert lint_schema_document({"default": {"validator": "object"}})

    def test_array_without_items(self):
        assert lint_schema_document({"validator": "array"})

    def test_missing_validator(self):
        assert lint_schema_document({"default": {"required": "x"}})

    def test_registry_without_default(self):
        assert lint_schema_document({"schemas": {"tag": {"validator": "string"}}})

    def test_bad_setting(self):
        problems = lint_schema_document({
            "settings": {"mode": "loose"},
            "schemas": {"default": {"validator": "string"}},
        })
        assert problems

    def test_hook_must_be_import_reference(self):
        assert lint_schema_document({"validator": "string", "preprocess": "strip"})

    def test_not_a_mapping(self):
        assert lint_schema_document(["default"])

    def test_missing_named_items(self):
        problems = lint_schema_document({
            "default": {
                "validator": "object",
                "properties": {"tags": {"validator": "array", "items": "tag"}},
            },
        })
        assert problems == ["default: no subschema 'tag' available"]

    def test_missing_named_items_in_single_node(self):
        problems = lint_schema_document({"validator": "array", "items": "tag"})
        assert problems == ["default: no subschema 'tag' available"]

    def test_self_reference_is_fine(self):
        document = {"default": {"validator": "array", "items": "default"}}
        assert lint_schema_document(document) == []
