"""
Schema Model: declarative description of the expected shape of a value.

A schema node is one of five variants, all sharing the optional attributes
of SchemaNode:

- ScalarNode:   leaf check delegated to a scalar validator type
- SequenceNode: list/tuple whose every item matches ``items``
- MappingNode:  dict whose declared keys each match a sub-schema
- ChainNode:    several nodes applied one after another
- CallbackNode: externally supplied predicate ``(value, refs) -> bool``

Wire format (YAML/JSON/dict):

    default:
      validator: object
      keyrename: {mail: email}
      properties:
        email:
          validator: email
          required: "email is required"
          invalid: "email is not valid"
        tags:
          validator: array
          items: tag
          max_items: 10
    tag:
      validator: string
      options: {max_length: 32}

The ``validator`` key selects the variant: the reserved tags ``array``,
``object``, ``chain`` and ``callback`` select the structural variants,
anything else is a scalar validator identifier.

Parsing does not reject missing ``properties``, ``chain``,
``callback`` and ``validator`` values; those are reported when the
validator reaches the node.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .exceptions import SchemaDefinitionError


# Reserved variant tags for the ``validator`` key
T_ARRAY = "array"
T_OBJECT = "object"
T_CHAIN = "chain"
T_CALLBACK = "callback"

RESERVED_TAGS = frozenset({T_ARRAY, T_OBJECT, T_CHAIN, T_CALLBACK})

# camelCase spellings accepted for compatibility with existing schemas
KEY_ALIASES = {
    "minItems": "min_items",
    "maxItems": "max_items",
    "maxDepth": "max_depth",
    "onSuccess": "on_success",
    "onFailure": "on_failure",
}

COMMON_KEYS = frozenset(
    {
        "validator",
        "keyrename",
        "ref",
        "preprocess",
        "on_success",
        "on_failure",
        "required",
        "invalid",
        "description",
    }
)

VARIANT_KEYS = {
    T_ARRAY: frozenset({"items", "min_items", "max_items", "max_depth"}),
    T_OBJECT: frozenset({"properties"}),
    T_CHAIN: frozenset({"chain"}),
    T_CALLBACK: frozenset({"callback"}),
    None: frozenset({"options"}),
}

Hook = Union[Callable[..., Any], str]

# Expected shape of structured attributes, checked by parse_node
ATTRIBUTE_TYPES = {
    "keyrename": "mapping",
    "properties": "mapping",
    "options": "mapping",
    "chain": "sequence",
    "items": "item",
    "min_items": "count",
    "max_items": "count",
    "max_depth": "count",
}

_KIND_NAMES = {
    "count": "a non-negative integer",
    "mapping": "a mapping",
    "sequence": "a list",
    "item": "a schema name or a schema node",
}


@dataclass(frozen=True)
class SchemaNode:
    """
    Attributes shared by every schema variant.

    Attributes:
        keyrename: Mapping of old -> new key applied to an incoming dict
        ref: Name under which the node's value is published to the reference table
        preprocess: Transform applied to the value before variant logic runs
        on_success: Zero-argument hook fired when the node passes
        on_failure: Zero-argument hook fired when the node fails
        required: Error token for a missing, empty or wrongly shaped value
        invalid: Error token for a value that fails its check
        description: Free-form documentation, ignored by the validator
    """

    keyrename: Optional[Mapping[str, str]] = None
    ref: Optional[str] = None
    preprocess: Optional[Hook] = None
    on_success: Optional[Hook] = None
    on_failure: Optional[Hook] = None
    required: Optional[str] = None
    invalid: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ScalarNode(SchemaNode):
    """Leaf node checked by a scalar validator type."""

    validator: Any = None
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SequenceNode(SchemaNode):
    """
    Ordered sequence node.

    ``items`` is either an inline node or the name of a registry entry.
    ``max_depth`` extends the depth budget relative to the current level.
    """

    items: Union[SchemaNode, str, None] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    max_depth: Optional[int] = None


@dataclass(frozen=True)
class MappingNode(SchemaNode):
    """Keyed structure node; ``properties`` maps key -> sub-schema."""

    properties: Optional[Mapping[str, SchemaNode]] = None


@dataclass(frozen=True)
class ChainNode(SchemaNode):
    """Applies each step to the result of the previous one."""

    chain: Optional[Tuple[SchemaNode, ...]] = None


@dataclass(frozen=True)
class CallbackNode(SchemaNode):
    """Node whose result is decided by ``callback(value, refs)``."""

    callback: Optional[Hook] = None


def _normalize_keys(spec: Mapping[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in spec.items():
        normalized[KEY_ALIASES.get(key, key)] = value
    return normalized


def _variant_of(validator: Any) -> Optional[str]:
    if isinstance(validator, str) and validator in RESERVED_TAGS:
        return validator
    return None


def _check_attribute(data: Dict[str, Any], key: str, path: str) -> None:
    """Raise SchemaDefinitionError if a present attribute has the wrong type."""
    value = data.get(key)
    if value is None:
        return
    kind = ATTRIBUTE_TYPES[key]
    if kind == "count":
        valid = isinstance(value, int) and not isinstance(value, bool) and value >= 0
    elif kind == "mapping":
        valid = isinstance(value, Mapping)
    elif kind == "sequence":
        valid = isinstance(value, (list, tuple))
    else:
        valid = isinstance(value, (str, Mapping, SchemaNode))
    if not valid:
        raise SchemaDefinitionError(
            f"Invalid schema attribute '{key}' at '{path or '<root>'}': "
            f"expected {_KIND_NAMES[kind]}, got {type(value).__name__}"
        )


def parse_node(spec: Union[SchemaNode, Mapping[str, Any]], path: str = "") -> SchemaNode:
    """
    Build a schema node from its declarative form.

    Args:
        spec: Node definition dict, or an existing SchemaNode (returned as is)
        path: Location of the node in the schema document, for error messages

    Returns:
        The parsed SchemaNode variant

    Raises:
        SchemaDefinitionError: If spec is not a dict, has unknown keys or an
            attribute of the wrong type

    Example:
        >>> node = parse_node({
        ...     "validator": "object",
        ...     "properties": {"name": {"validator": "string", "required": "name required"}},
        ... })
        >>> isinstance(node, MappingNode)
        True
    """
    if isinstance(spec, SchemaNode):
        return spec
    if not isinstance(spec, Mapping):
        raise SchemaDefinitionError(
            f"Invalid schema node at '{path or '<root>'}': "
            f"expected a mapping, got {type(spec).__name__}"
        )

    data = _normalize_keys(spec)
    variant = _variant_of(data.get("validator"))

    unknown = set(data) - COMMON_KEYS - VARIANT_KEYS[variant]
    if unknown:
        raise SchemaDefinitionError(
            f"Unknown schema attribute(s) {sorted(unknown)} at '{path or '<root>'}'"
        )

    for key in ATTRIBUTE_TYPES:
        _check_attribute(data, key, path)

    common = {key: data[key] for key in COMMON_KEYS - {"validator"} if key in data}
    if common.get("keyrename") is not None:
        common["keyrename"] = MappingProxyType(dict(common["keyrename"]))

    if variant == T_ARRAY:
        items = data.get("items")
        if isinstance(items, (Mapping, SchemaNode)):
            items = parse_node(items, f"{path}.items" if path else "items")
        return SequenceNode(
            items=items,
            min_items=data.get("min_items"),
            max_items=data.get("max_items"),
            max_depth=data.get("max_depth"),
            **common,
        )

    if variant == T_OBJECT:
        properties = data.get("properties")
        if properties is not None:
            properties = MappingProxyType(
                {
                    name: parse_node(sub, f"{path}.{name}" if path else str(name))
                    for name, sub in properties.items()
                }
            )
        return MappingNode(properties=properties, **common)

    if variant == T_CHAIN:
        chain = data.get("chain")
        if chain is not None:
            chain = tuple(
                parse_node(step, f"{path}.chain[{idx}]" if path else f"chain[{idx}]")
                for idx, step in enumerate(chain)
            )
        return ChainNode(chain=chain, **common)

    if variant == T_CALLBACK:
        return CallbackNode(callback=data.get("callback"), **common)

    return ScalarNode(
        validator=data.get("validator"),
        options=MappingProxyType(dict(data.get("options") or {})),
        **common,
    )
