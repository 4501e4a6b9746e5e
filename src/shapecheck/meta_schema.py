"""
Structural checks for schema documents.

The JSON Schema below describes the wire format of a schema document
(YAML/JSON). It is used by ``shapecheck lint`` to report authoring
mistakes before any data is validated; the validator itself does not need
it and reports broken schemas lazily.
"""

from typing import Any, Dict, List

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from .nodes import T_ARRAY, T_CALLBACK, T_CHAIN, T_OBJECT

_HOOK = {"type": "string", "pattern": r"^[\w.]+:[\w.]+$"}
_TOKEN = {"type": "string"}
_COUNT = {"type": "integer", "minimum": 0}

SCHEMA_DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$defs": {
        "node": {
            "type": "object",
            "required": ["validator"],
            "properties": {
                "validator": {"type": "string", "minLength": 1},
                "description": {"type": "string"},
                "required": _TOKEN,
                "invalid": _TOKEN,
                "ref": {"type": "string"},
                "keyrename": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                },
                "preprocess": _HOOK,
                "on_success": _HOOK,
                "onSuccess": _HOOK,
                "on_failure": _HOOK,
                "onFailure": _HOOK,
                "options": {"type": "object"},
                "items": {
                    "oneOf": [{"type": "string"}, {"$ref": "#/$defs/node"}],
                },
                "min_items": _COUNT,
                "minItems": _COUNT,
                "max_items": _COUNT,
                "maxItems": _COUNT,
                "max_depth": _COUNT,
                "maxDepth": _COUNT,
                "properties": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/$defs/node"},
                },
                "chain": {
                    "type": "array",
                    "items": {"$ref": "#/$defs/node"},
                },
                "callback": _HOOK,
            },
            "additionalProperties": False,
            "allOf": [
                {
                    "if": {"properties": {"validator": {"const": T_ARRAY}}},
                    "then": {"required": ["items"]},
                },
                {
                    "if": {"properties": {"validator": {"const": T_OBJECT}}},
                    "then": {"required": ["properties"]},
                },
                {
                    "if": {"properties": {"validator": {"const": T_CHAIN}}},
                    "then": {"required": ["chain"]},
                },
                {
                    "if": {"properties": {"validator": {"const": T_CALLBACK}}},
                    "then": {"required": ["callback"]},
                },
            ],
        },
        "registry": {
            "type": "object",
            "required": ["default"],
            "additionalProperties": {"$ref": "#/$defs/node"},
        },
    },
    "oneOf": [
        {
            "type": "object",
            "required": ["schemas"],
            "properties": {
                "schemas": {"$ref": "#/$defs/registry"},
                "settings": {
                    "type": "object",
                    "properties": {
                        "mode": {"enum": ["strict", "cleanup", "ignore"]},
                        "fail_early": {"type": "boolean"},
                        "validate_charset": {"type": "boolean"},
                        "charset": {"type": "string"},
                        "max_depth": _COUNT,
                    },
                    "additionalProperties": False,
                },
            },
            "additionalProperties": False,
        },
        {
            "allOf": [
                {"$ref": "#/$defs/registry"},
                {"not": {"required": ["schemas"]}},
            ]
        },
        {
            "allOf": [
                {"$ref": "#/$defs/node"},
                {"not": {"required": ["default"]}},
            ]
        },
    ],
}


def _format_path(path) -> str:
    parts = []
    for part in path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            parts.append(f".{part}" if parts else str(part))
    return "".join(parts) or "<root>"


def _named_items(node: Any) -> List[str]:
    """Collect ``items`` references by name from a node and its children."""
    names: List[str] = []
    if not isinstance(node, dict):
        return names
    items = node.get("items")
    if isinstance(items, str):
        names.append(items)
    else:
        names.extend(_named_items(items))
    for sub in (node.get("properties") or {}).values():
        names.extend(_named_items(sub))
    for step in node.get("chain") or []:
        names.extend(_named_items(step))
    return names


def lint_schema_document(document: Any) -> List[str]:
    """
    Check a raw schema document for authoring mistakes.

    Checks the document structure against SCHEMA_DOCUMENT_SCHEMA, then that
    every named ``items`` reference exists in the registry.

    Args:
        document: Parsed YAML/JSON document

    Returns:
        List of problem descriptions (empty if the document is well formed)
    """
    validator = Draft202012Validator(SCHEMA_DOCUMENT_SCHEMA)
    error = best_match(validator.iter_errors(document))
    if error is not None:
        return [f"{_format_path(error.absolute_path)}: {error.message}"]

    problems: List[str] = []

    if "schemas" in document:
        registry = document["schemas"]
    elif "default" in document:
        registry = document
    else:
        registry = {"default": document}

    for name, node in registry.items():
        for ref in _named_items(node):
            if ref not in registry:
                problems.append(f"{name}: no subschema '{ref}' available")
    return problems
