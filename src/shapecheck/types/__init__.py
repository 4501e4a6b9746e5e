"""
Scalar validator types for shapecheck.

Leaf checks invoked by the schema validator through the uniform
``pre_filter(value)`` / ``validate(value)`` interface.

Example:
    >>> from shapecheck.types import create_type
    >>> email = create_type("email")
    >>> email.validate(email.pre_filter("  ann@example.org "))
    True
"""

from .base import ValidatorType
from .builtin import (
    BUILTIN_TYPES,
    Boolean,
    Choice,
    Email,
    Integer,
    Number,
    Pattern,
    String,
)
from .encoding import DEFAULT_CHARSET, Encoding
from .registry import (
    available_types,
    create_type,
    get_type,
    register_type,
    unregister_type,
)

__all__ = [
    "ValidatorType",
    "Encoding",
    "DEFAULT_CHARSET",
    # Built-in types
    "BUILTIN_TYPES",
    "String",
    "Pattern",
    "Email",
    "Number",
    "Integer",
    "Boolean",
    "Choice",
    # Registry
    "register_type",
    "unregister_type",
    "get_type",
    "available_types",
    "create_type",
]
