"""
Schema Registry: the named collection of schema nodes.

Exactly one entry, ``default``, is the root schema. Other entries exist so
that sequences can refer to a schema by name, which allows shared and
self-referential schemas:

    default:
      validator: array
      items: comment
    comment:
      validator: object
      properties:
        text: {validator: string}
        replies: {validator: array, items: comment}

Named references are resolved lazily, when the validator reaches them, so
entries may refer to each other in any order.

Schema documents can be loaded from local files or any fsspec URL
(s3://, gs://, https://, memory://, ...). A document is either a bare
registry as above, or a dict with ``schemas`` and optional ``settings``:

    settings:
      mode: cleanup
      fail_early: true
    schemas:
      default: {...}
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import fsspec
import yaml

from .exceptions import SchemaDefinitionError
from .nodes import SchemaNode, parse_node

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "default"


class SchemaRegistry(Mapping):
    """
    Immutable mapping of schema name -> SchemaNode.

    Example:
        >>> registry = SchemaRegistry.from_dict({
        ...     "default": {"validator": "array", "items": "tag"},
        ...     "tag": {"validator": "string"},
        ... })
        >>> sorted(registry)
        ['default', 'tag']
    """

    def __init__(self, schemas: Mapping[str, SchemaNode]):
        self._schemas = MappingProxyType(dict(schemas))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SchemaRegistry":
        """
        Parse a registry from its declarative form.

        A dict that has no ``default`` entry but is itself a schema node
        (has a ``validator`` key) is taken as the default schema.

        Raises:
            SchemaDefinitionError: If an entry is not a valid schema node
        """
        if isinstance(raw, SchemaRegistry):
            return raw
        if not isinstance(raw, Mapping):
            raise SchemaDefinitionError(
                f"Schema registry must be a mapping, got {type(raw).__name__}"
            )
        if DEFAULT_SCHEMA not in raw and "validator" in raw:
            raw = {DEFAULT_SCHEMA: raw}
        return cls({name: parse_node(spec, str(name)) for name, spec in raw.items()})

    @classmethod
    def from_yaml(cls, content: str) -> "SchemaRegistry":
        """Parse a registry from YAML text (a bare registry, not a document)."""
        return cls.from_dict(yaml.safe_load(content) or {})

    def __getitem__(self, name: str) -> SchemaNode:
        return self._schemas[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    @property
    def default(self) -> SchemaNode:
        """
        The root schema.

        Raises:
            SchemaDefinitionError: If there is no ``default`` entry
        """
        if DEFAULT_SCHEMA not in self._schemas:
            raise SchemaDefinitionError("no default schema specified!")
        return self._schemas[DEFAULT_SCHEMA]

    def resolve(self, item: Union[SchemaNode, str, None], path: Optional[str] = None) -> SchemaNode:
        """
        Resolve an inline node or a schema name to a node.

        Raises:
            SchemaDefinitionError: If a named schema does not exist
        """
        if isinstance(item, SchemaNode):
            return item
        if isinstance(item, str) and item in self._schemas:
            logger.debug(f"Resolved named schema '{item}'")
            return self._schemas[item]
        raise SchemaDefinitionError(f"schema error -- no subschema '{item}' available", path=path)

    def __repr__(self) -> str:
        return f"SchemaRegistry(schemas={list(self._schemas)})"


def parse_schema_document(
    document: Any,
) -> Tuple[SchemaRegistry, Dict[str, Any]]:
    """
    Split a schema document into its registry and settings.

    Returns:
        Tuple of (SchemaRegistry, settings dict)

    Raises:
        SchemaDefinitionError: If the document is not a mapping
    """
    if not isinstance(document, Mapping):
        raise SchemaDefinitionError(
            f"Schema document must be a mapping, got {type(document).__name__}"
        )
    if "schemas" in document:
        settings = document.get("settings") or {}
        if not isinstance(settings, Mapping):
            raise SchemaDefinitionError("'settings' must be a mapping")
        return SchemaRegistry.from_dict(document["schemas"] or {}), dict(settings)
    return SchemaRegistry.from_dict(document), {}


def read_schema_document(source: str) -> Any:
    """
    Read and parse a YAML/JSON schema document.

    Args:
        source: Local path or fsspec URL

    Raises:
        FileNotFoundError: If the source does not exist
        yaml.YAMLError: If the content is not valid YAML
    """
    logger.debug(f"Loading schema document from {source}")
    with fsspec.open(source, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_schema_document(source: str) -> Tuple[SchemaRegistry, Dict[str, Any]]:
    """
    Load a schema document from a local path or fsspec URL.

    Returns:
        Tuple of (SchemaRegistry, settings dict)

    Example:
        >>> registry, settings = load_schema_document("schemas/user.yaml")
        >>> registry, settings = load_schema_document("s3://bucket/schemas/user.yaml")
    """
    return parse_schema_document(read_schema_document(source))
