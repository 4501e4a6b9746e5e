"""
Resolution of ``"module:attr"`` references to Python objects.

Schema documents loaded from YAML cannot hold functions, so hooks,
preprocessors, callbacks and custom scalar types may be written as import
references instead:

    preprocess: "mypkg.cleaners:strip_all"
    validator: "mypkg.types:PostCode"
"""

import importlib
import logging
from typing import Any, Callable, Optional

from .exceptions import SchemaDefinitionError

logger = logging.getLogger(__name__)


def is_import_reference(value: Any) -> bool:
    """Check if value looks like a ``module:attr`` import reference."""
    if not isinstance(value, str) or value.count(":") != 1:
        return False
    module_path, attr = value.split(":")
    return bool(module_path) and bool(attr)


def import_object(reference: str) -> Any:
    """
    Import the object named by a ``module:attr`` reference.

    Dotted attribute paths after the colon are followed
    (``"pkg.mod:Class.factory"``).

    Raises:
        SchemaDefinitionError: If the module or attribute cannot be found
    """
    if not is_import_reference(reference):
        raise SchemaDefinitionError(
            f"Invalid import reference '{reference}'. Expected 'module:attribute'"
        )

    module_path, attr_path = reference.split(":")
    try:
        obj = importlib.import_module(module_path)
    except ImportError as e:
        raise SchemaDefinitionError(
            f"Cannot import module '{module_path}' for '{reference}': {e}"
        ) from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise SchemaDefinitionError(
                f"Module '{module_path}' has no attribute '{attr_path}'"
            ) from e

    logger.debug(f"Resolved import reference '{reference}'")
    return obj


def resolve_callable(
    value: Any, role: str, path: Optional[str] = None
) -> Callable[..., Any]:
    """
    Turn a schema-declared hook/callback into a callable.

    Args:
        value: A callable, or a ``module:attr`` string naming one
        role: Schema attribute the value came from (used in error messages)
        path: Location in the validated value, for error messages

    Raises:
        SchemaDefinitionError: If value is not (and does not name) a callable
    """
    if isinstance(value, str):
        value = import_object(value)
    if not callable(value):
        raise SchemaDefinitionError(f"no valid {role} available", path=path)
    return value
