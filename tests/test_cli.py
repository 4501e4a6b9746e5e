"""
Unit tests for the shapecheck command-line interface.

Tests the validate, lint and types subcommands.
"""

import json
import os
import re
import tempfile
import unittest
from pathlib import Path

import pytest
from typer.testing import CliRunner

from shapecheck import __version__
from shapecheck.cli import EXIT_INVALID, EXIT_SCHEMA_ERROR, app, parse_data

# Disable rich/ANSI color output for consistent test assertions
os.environ["NO_COLOR"] = "1"

runner = CliRunner()

FIXTURES = Path(__file__).parent / "fixtures"

USER_SCHEMA = """
settings:
  mode: strict
schemas:
  default:
    validator: object
    invalid: unexpected fields
    properties:
      name:
        validator: string
        required: name required
      email:
        validator: email
        required: email required
        invalid: email invalid
"""


def strip_ansi(text: str) -> str:
    """Strip ANSI escape codes from text for consistent test assertions."""
    return re.compile(r"\x1b\[[0-9;]*m").sub("", text)


class CliTestCase(unittest.TestCase):
    """Writes schema documents into a temporary directory."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name: str, content: str) -> str:
        path = self.tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)


class TestParseData(CliTestCase):
    """Test data parsing logic."""

    def test_parse_none(self):
        self.assertIsNone(parse_data(None))

    def test_parse_json_string(self):
        self.assertEqual(parse_data('{"a": [1, 2]}'), {"a": [1, 2]})

    def test_parse_scalar_json(self):
        self.assertEqual(parse_data('"text"'), "text")

    def test_parse_file(self):
        path = self.write("data.json", json.dumps({"from_file": True}))
        self.assertEqual(parse_data(f"@{path}"), {"from_file": True})


class TestValidateCommand(CliTestCase):
    """Test the validate subcommand."""

    def setUp(self):
        super().setUp()
        self.schema = self.write("user.yaml", USER_SCHEMA)

    def test_valid_data(self):
        result = runner.invoke(
            app, ["validate", self.schema, "--data", '{"name": " Ann ", "email": "ann@example.org"}']
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output), {"name": "Ann", "email": "ann@example.org"})

    def test_invalid_data(self):
        result = runner.invoke(app, ["validate", self.schema, "--data", '{"email": "nope"}'])
        self.assertEqual(result.exit_code, EXIT_INVALID)
        output = strip_ansi(result.output)
        self.assertIn("Validation failed:", output)
        self.assertIn("  - name: name required", output)
        self.assertIn("  - email: email invalid", output)

    def test_fail_early_flag(self):
        result = runner.invoke(app, ["validate", self.schema, "--data", "{}", "--fail-early"])
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertIn("name required", result.output)
        self.assertNotIn("email required", result.output)

    def test_mode_flag_overrides_document(self):
        data = '{"name": "Ann", "email": "ann@example.org", "debug": true}'
        strict = runner.invoke(app, ["validate", self.schema, "--data", data])
        self.assertEqual(strict.exit_code, EXIT_INVALID)
        self.assertIn("unexpected fields", strict.output)

        cleanup = runner.invoke(app, ["validate", self.schema, "--data", data, "--mode", "cleanup"])
        self.assertEqual(cleanup.exit_code, 0, cleanup.output)
        self.assertNotIn("debug", cleanup.output)

    def test_invalid_mode_choice(self):
        result = runner.invoke(app, ["validate", self.schema, "--data", "{}", "--mode", "loose"])
        self.assertNotEqual(result.exit_code, 0)

    def test_data_from_stdin(self):
        result = runner.invoke(
            app, ["validate", self.schema], input='{"name": "Ann", "email": "ann@example.org"}'
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('"name": "Ann"', result.output)

    def test_data_from_file(self):
        data = self.write("data.json", '{"name": "Ann", "email": "ann@example.org"}')
        result = runner.invoke(app, ["validate", self.schema, "--data", f"@{data}"])
        self.assertEqual(result.exit_code, 0, result.output)

    def test_invalid_json(self):
        result = runner.invoke(app, ["validate", self.schema, "--data", "{not json"])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("Invalid JSON", result.output)

    def test_missing_data_file(self):
        result = runner.invoke(app, ["validate", self.schema, "--data", "@/nonexistent/data.json"])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("Data file not found", result.output)

    def test_output_file(self):
        output = self.tmp_path / "clean.json"
        result = runner.invoke(
            app,
            ["validate", self.schema, "--data", '{"name": "Ann", "email": "ann@example.org"}',
             "--output", str(output)],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(output.read_text()), {"name": "Ann", "email": "ann@example.org"})

    def test_quiet_suppresses_output(self):
        result = runner.invoke(
            app, ["validate", self.schema, "-q", "--data", '{"name": "Ann", "email": "ann@example.org"}']
        )
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), "")

    def test_quiet_still_reports_errors(self):
        result = runner.invoke(app, ["validate", self.schema, "-q", "--data", '{"email": "nope"}'])
        self.assertEqual(result.exit_code, EXIT_INVALID)
        output = strip_ansi(result.output)
        self.assertIn("Validation failed:", output)
        self.assertIn("  - name: name required", output)

    def test_malformed_schema_attribute(self):
        schema = self.write("bad.yaml", "default:\n  validator: array\n  min_items: \"2\"\n  items: {validator: integer}\n")
        result = runner.invoke(app, ["validate", schema, "--data", "[1, 2]"])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("Schema error:", result.output)
        self.assertIn("min_items", result.output)

    def test_missing_schema_file(self):
        result = runner.invoke(app, ["validate", "/nonexistent/schema.yaml", "--data", "{}"])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("Schema not found", result.output)

    def test_invalid_yaml(self):
        schema = self.write("broken.yaml", "default: [unclosed\n")
        result = runner.invoke(app, ["validate", schema, "--data", "{}"])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("Invalid YAML", result.output)

    def test_schema_error(self):
        schema = self.write("tags.yaml", "default:\n  validator: array\n  items: tag\n")
        result = runner.invoke(app, ["validate", schema, "--data", '["a"]'])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("Schema error:", result.output)
        self.assertIn("no subschema 'tag' available", result.output)

    def test_bad_document_setting(self):
        schema = self.write("bad.yaml", "settings: {mode: loose}\nschemas:\n  default: {validator: string}\n")
        result = runner.invoke(app, ["validate", schema, "--data", '"x"'])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("Configuration error:", result.output)

    def test_max_depth_option(self):
        schema = self.write("tree.yaml", "default:\n  validator: array\n  items: default\n")
        self.assertEqual(runner.invoke(app, ["validate", schema, "--data", "[[]]", "--max-depth", "1"]).exit_code, 0)
        self.assertEqual(
            runner.invoke(app, ["validate", schema, "--data", "[[[]]]", "--max-depth", "1"]).exit_code,
            EXIT_INVALID,
        )

    def test_types_file(self):
        schema = self.write("post.yaml", "default:\n  validator: postcode\n  invalid: bad post code\n")
        types_file = str(FIXTURES / "sample_types.py")

        result = runner.invoke(app, ["validate", schema, "--data", '"12 345"', "--types-file", types_file])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output), "12345")

        result = runner.invoke(app, ["validate", schema, "--data", '"123"', "--types-file", types_file])
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertIn("bad post code", result.output)

    def test_types_module(self):
        schema = self.write("post.yaml", "default:\n  validator: postcode\n")
        result = runner.invoke(
            app, ["validate", schema, "--data", '"54321"', "--types-module", "fixtures.sample_types"]
        )
        self.assertEqual(result.exit_code, 0, result.output)

    def test_types_module_without_register_function(self):
        schema = self.write("s.yaml", "default:\n  validator: string\n")
        result = runner.invoke(app, ["validate", schema, "--data", '"x"', "--types-module", "json"])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("register_types", result.output)

    def test_unknown_types_module(self):
        schema = self.write("s.yaml", "default:\n  validator: string\n")
        result = runner.invoke(
            app, ["validate", schema, "--data", '"x"', "--types-module", "no_such_module_xyz"]
        )
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)
        self.assertIn("Cannot import module", result.output)


class TestLintCommand(CliTestCase):
    """Test the lint subcommand."""

    def test_valid_document(self):
        schema = self.write("user.yaml", USER_SCHEMA)
        result = runner.invoke(app, ["lint", schema])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("is valid", result.output)

    def test_detailed(self):
        schema = self.write(
            "tags.yaml", "default:\n  validator: array\n  items: tag\ntag:\n  validator: string\n"
        )
        result = runner.invoke(app, ["lint", schema, "--detailed"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Schemas: 2", result.output)
        self.assertIn("default (SequenceNode)", result.output)
        self.assertIn("tag (ScalarNode)", result.output)

    def test_detailed_shows_settings(self):
        schema = self.write("user.yaml", USER_SCHEMA)
        result = runner.invoke(app, ["lint", schema, "--detailed"])
        self.assertIn('Settings: {"mode": "strict"}', result.output)

    def test_missing_reference(self):
        schema = self.write("tags.yaml", "default:\n  validator: array\n  items: tag\n")
        result = runner.invoke(app, ["lint", schema])
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertIn("Lint failed", result.output)
        self.assertIn("no subschema 'tag' available", result.output)

    def test_unknown_attribute(self):
        schema = self.write("typo.yaml", "default:\n  validator: string\n  requird: oops\n")
        result = runner.invoke(app, ["lint", schema])
        self.assertEqual(result.exit_code, EXIT_INVALID)

    def test_missing_file(self):
        result = runner.invoke(app, ["lint", "/nonexistent/schema.yaml"])
        self.assertEqual(result.exit_code, EXIT_SCHEMA_ERROR)


class TestTypesCommand(unittest.TestCase):
    """Test the types subcommand."""

    def test_lists_builtin_types(self):
        result = runner.invoke(app, ["types"])
        self.assertEqual(result.exit_code, 0)
        names = result.output.split()
        self.assertIn("email", names)
        self.assertIn("integer", names)
        self.assertEqual(names, sorted(names))

    def test_lists_loaded_types(self):
        result = runner.invoke(app, ["types", "--types-file", str(FIXTURES / "sample_types.py")])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("postcode", result.output.split())


class TestVersion(unittest.TestCase):

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(f"shapecheck {__version__}", result.output)


@pytest.mark.parametrize("args", [["validate"], ["lint"]])
def test_schema_argument_required(args):
    result = runner.invoke(app, args)
    assert result.exit_code != 0
