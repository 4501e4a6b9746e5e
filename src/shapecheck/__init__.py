"""
shapecheck: recursive, schema-driven validation of nested data.

Describe the expected shape of a value as a registry of schema nodes and
get back either a sanitized copy of the value or the list of error
messages chosen by the schema author.

- Mappings, sequences, validation chains and callbacks
- Scalar checks through pluggable validator types
- Strict / cleanup / ignore policies for undeclared keys
- Fail-early or collect-all error reporting
- Key renaming, preprocessing, cross-field references and hooks

Example:
    >>> from shapecheck import SchemaValidator
    >>> validator = SchemaValidator({
    ...     "validator": "object",
    ...     "properties": {
    ...         "email": {"validator": "email", "required": "email required",
    ...                   "invalid": "email invalid"},
    ...     },
    ... }, mode="cleanup")
    >>> validator.validate({"email": "ann@example.org", "debug": True})
    {'email': 'ann@example.org'}
"""

from .config import ExtraFields, ValidatorSettings, resolve_settings
from .exceptions import SchemaDefinitionError, ValidationError, ValidationErrorDetail
from .nodes import (
    T_ARRAY,
    T_CALLBACK,
    T_CHAIN,
    T_OBJECT,
    CallbackNode,
    ChainNode,
    MappingNode,
    ScalarNode,
    SchemaNode,
    SequenceNode,
    parse_node,
)
from .registry import SchemaRegistry, load_schema_document, parse_schema_document
from .session import ValidationSession
from .types import ValidatorType, available_types, register_type
from .validator import SchemaValidator, validate_value

__all__ = [
    "__version__",
    # Validator
    "SchemaValidator",
    "validate_value",
    "ValidationSession",
    # Schema model
    "SchemaNode",
    "ScalarNode",
    "SequenceNode",
    "MappingNode",
    "ChainNode",
    "CallbackNode",
    "parse_node",
    "T_ARRAY",
    "T_OBJECT",
    "T_CHAIN",
    "T_CALLBACK",
    "SchemaRegistry",
    "load_schema_document",
    "parse_schema_document",
    # Settings
    "ExtraFields",
    "ValidatorSettings",
    "resolve_settings",
    # Scalar types
    "ValidatorType",
    "register_type",
    "available_types",
    # Errors
    "SchemaDefinitionError",
    "ValidationError",
    "ValidationErrorDetail",
]

__version__ = "0.3.1"
