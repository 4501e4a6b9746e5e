"""
Registry of scalar validator types.

Maps identifiers used in schemas (``validator: email``) to ValidatorType
classes. Identifiers that are not registered may also be given as import
references (``validator: "mypkg.types:PostCode"``).
"""

import inspect
import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from ..callables import import_object, is_import_reference
from ..exceptions import SchemaDefinitionError
from .base import ValidatorType
from .builtin import BUILTIN_TYPES

logger = logging.getLogger(__name__)

_TYPE_REGISTRY: Dict[str, Type[ValidatorType]] = dict(BUILTIN_TYPES)


def register_type(name: str, type_class: Type[ValidatorType]) -> None:
    """
    Register a custom scalar validator type.

    Args:
        name: Identifier used in schemas
        type_class: ValidatorType subclass

    Raises:
        TypeError: If type_class is not a ValidatorType subclass

    Example:
        class PostCode(ValidatorType):
            ...

        register_type("postcode", PostCode)
    """
    if not (inspect.isclass(type_class) and issubclass(type_class, ValidatorType)):
        raise TypeError(f"'{type_class!r}' is not a ValidatorType subclass")
    _TYPE_REGISTRY[name] = type_class


def unregister_type(name: str) -> None:
    """Remove a registered type. Unknown names are ignored."""
    _TYPE_REGISTRY.pop(name, None)


def get_type(name: str) -> Type[ValidatorType]:
    """
    Look up a type class by identifier.

    Raises:
        SchemaDefinitionError: If name is not registered and is not an
            import reference to a ValidatorType subclass
    """
    if name in _TYPE_REGISTRY:
        return _TYPE_REGISTRY[name]

    if is_import_reference(name):
        type_class = import_object(name)
        if inspect.isclass(type_class) and issubclass(type_class, ValidatorType):
            return type_class

    valid_types = ", ".join(available_types())
    raise SchemaDefinitionError(
        f"'{name}' is not a validation type. Registered types: {valid_types}"
    )


def available_types() -> List[str]:
    """
    Get a list of registered type identifiers.

    Returns:
        Sorted list of type names
    """
    return sorted(_TYPE_REGISTRY.keys())


def create_type(
    validator: Any,
    options: Optional[Mapping[str, Any]] = None,
    path: Optional[str] = None,
) -> ValidatorType:
    """
    Obtain a ValidatorType instance for a schema-declared validator.

    Args:
        validator: A ValidatorType instance (returned as is), a ValidatorType
                   subclass, a registered name or an import reference
        options: Constructor options for the type
        path: Location in the validated value, for error messages

    Raises:
        SchemaDefinitionError: If validator does not resolve to a type or the
            type rejects its options
    """
    if isinstance(validator, ValidatorType):
        return validator

    if isinstance(validator, str):
        type_class = get_type(validator)
    elif inspect.isclass(validator) and issubclass(validator, ValidatorType):
        type_class = validator
    else:
        raise SchemaDefinitionError(f"'{validator!r}' is not a validation type", path=path)

    try:
        return type_class(options or {})
    except (TypeError, ValueError, KeyError) as e:
        raise SchemaDefinitionError(
            f"Invalid options for validation type '{type_class.__name__}': {e}", path=path
        ) from e
