"""
Schema validator: walks a value alongside its schema.

The walk visits every (value, schema node) pair once, in a fixed order per
node:

1. depth guard (silent failure past ``max_depth``)
2. key rename
3. reference capture
4. preprocess
5. variant check (sequence, mapping, chain, callback or scalar)
6. success/failure hook

and returns the node result together with the transformed value, so the
caller always receives a sanitized copy rather than the original input.

Example:
    >>> from shapecheck import SchemaValidator
    >>> validator = SchemaValidator({
    ...     "default": {
    ...         "validator": "object",
    ...         "properties": {
    ...             "name": {"validator": "string", "required": "name required"},
    ...         },
    ...     }
    ... })
    >>> validator.validate({"name": " Ann "})
    {'name': 'Ann'}
    >>> validator.validate({})
    False
    >>> validator.errors
    ['name required']
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .callables import resolve_callable
from .config import ExtraFields, ValidatorSettings, resolve_settings
from .exceptions import SchemaDefinitionError
from .nodes import (
    CallbackNode,
    ChainNode,
    MappingNode,
    ScalarNode,
    SchemaNode,
    SequenceNode,
)
from .registry import SchemaRegistry, load_schema_document
from .session import ValidationSession
from .types import Encoding, ValidatorType, create_type

logger = logging.getLogger(__name__)

INVALID_ENCODING = "Invalid encoding"


def _key_path(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def _index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def _rename_keys(value: Dict[Any, Any], rename: Mapping[str, str]) -> Dict[Any, Any]:
    """
    Rename the keys of a dict, keeping their order.

    When two keys end up with the same name (``{"mail": a, "email": b}``
    renamed with ``{"mail": "email"}``), the value that comes later in the
    input wins and the key keeps the position of its first occurrence.
    """
    renamed: Dict[Any, Any] = {}
    for key, item in value.items():
        new_key = rename.get(key, key)
        if new_key in renamed:
            logger.debug(f"Key '{key}' renamed onto existing key '{new_key}', later value wins")
        renamed[new_key] = item
    return renamed


class SchemaValidator:
    """
    Validates values against a schema registry.

    One instance can be reused for many values. ``validate`` keeps the
    result of the most recent run on the instance (``errors``, ``data``,
    ``is_valid``); use ``check`` instead when one instance is shared between
    threads, since it returns a private ValidationSession.

    Args:
        schema: SchemaRegistry, or its declarative dict form
        mode: Extra-field policy: "strict", "cleanup" or "ignore"
        fail_early: Stop at the first failure
        validate_charset: Check scalar values against ``charset``
        charset: Charset for encoding checks (default: utf-8)
        max_depth: Maximum sequence nesting level (0 = unbounded)
        settings: Lower-priority settings, e.g. from a schema document

    Arguments left as None fall back to SHAPECHECK_* environment
    variables, then to ``settings``, then to defaults.

    Raises:
        SchemaDefinitionError: If the schema cannot be parsed
        ValueError: If a setting is invalid
        LookupError: If the charset is unknown
    """

    def __init__(
        self,
        schema: Union[SchemaRegistry, Mapping[str, Any]],
        mode: Optional[Union[ExtraFields, str]] = None,
        fail_early: Optional[bool] = None,
        validate_charset: Optional[bool] = None,
        charset: Optional[str] = None,
        max_depth: Optional[int] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        self.registry = SchemaRegistry.from_dict(schema)
        self.settings: ValidatorSettings = resolve_settings(
            settings,
            mode=mode,
            fail_early=fail_early,
            validate_charset=validate_charset,
            charset=charset,
            max_depth=max_depth,
        )
        self._encoding: Optional[Encoding] = None
        if self.settings.validate_charset:
            self._encoding = Encoding.get_instance(self.settings.charset)
        # Scalar types built from names, keyed by node identity
        self._types: Dict[int, ValidatorType] = {}
        self._session = ValidationSession()

    @classmethod
    def from_file(cls, source: str, **kwargs: Any) -> "SchemaValidator":
        """
        Create a validator from a schema document.

        Args:
            source: Local path or fsspec URL of a YAML/JSON document
            **kwargs: Constructor arguments; these override the document's
                ``settings`` section
        """
        registry, settings = load_schema_document(source)
        return cls(registry, settings=settings, **kwargs)

    # ------------------------------------------------------------------
    # Results of the most recent validate() call
    # ------------------------------------------------------------------

    @property
    def errors(self):
        """Error tokens collected by the most recent ``validate`` call."""
        return self._session.errors

    @property
    def data(self) -> Any:
        """Sanitized value produced by the most recent ``validate`` call."""
        return self._session.data

    @property
    def is_valid(self) -> bool:
        """Whether the most recent ``validate`` call succeeded."""
        return self._session.is_valid

    @property
    def session(self) -> ValidationSession:
        return self._session

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def check(self, value: Any) -> ValidationSession:
        """
        Validate a value in a fresh session without touching instance state.

        Returns:
            The completed ValidationSession

        Raises:
            SchemaDefinitionError: If the schema is broken
        """
        root = self.registry.default
        session = ValidationSession()
        ok, data = self._validate_node(session, value, root, 0, self.settings.max_depth, "")
        session.data = data
        session.is_valid = bool(ok)
        logger.debug(
            f"Validation finished: valid={session.is_valid}, errors={len(session.errors)}"
        )
        return session

    def validate(self, value: Any) -> Any:
        """
        Apply the ``default`` schema to a value.

        Returns:
            The sanitized value, or False if validation failed

        Raises:
            SchemaDefinitionError: If the schema is broken
        """
        self._session = self.check(value)
        return self._session.data if self._session.is_valid else False

    def validate_or_raise(self, value: Any) -> Any:
        """
        Like ``validate``, but raise instead of returning False.

        Raises:
            ValidationError: If validation failed
            SchemaDefinitionError: If the schema is broken
        """
        self._session = self.check(value)
        self._session.raise_for_errors()
        return self._session.data

    # ------------------------------------------------------------------
    # Validation driver
    # ------------------------------------------------------------------

    def _fail(self, session: ValidationSession, token: Optional[str], path: str) -> None:
        if token is not None:
            session.add_error(token, path=path or None)

    def _validate_node(
        self,
        session: ValidationSession,
        value: Any,
        node: SchemaNode,
        level: int,
        max_depth: int,
        path: str,
    ) -> Tuple[bool, Any]:
        """
        Validate one value against one schema node.

        Args:
            session: Session collecting errors and references
            value: Value to validate
            node: Expected schema of the value
            level: Current sequence nesting level
            max_depth: Maximum allowed level (0 = unbounded)
            path: Location of the value, for error details

        Returns:
            Tuple of (success, transformed value)
        """
        if max_depth != 0 and level > max_depth:
            # Structural cutoff, not reported as an error
            logger.debug(f"Max depth {max_depth} exceeded at level {level} ({path or '<root>'})")
            return False, value

        if node.keyrename is not None and isinstance(value, dict):
            value = _rename_keys(value, node.keyrename)

        if node.ref is not None:
            session.refs[node.ref] = value

        if node.preprocess is not None:
            value = resolve_callable(node.preprocess, "preprocess", path)(value)
            if node.ref is not None:
                session.refs[node.ref] = value

        if isinstance(node, SequenceNode):
            ok, value = self._validate_sequence(session, value, node, level, max_depth, path)
        elif isinstance(node, MappingNode):
            ok, value = self._validate_mapping(session, value, node, level, max_depth, path)
        elif isinstance(node, ChainNode):
            ok, value = self._validate_chain(session, value, node, level, max_depth, path)
        elif isinstance(node, CallbackNode):
            ok = self._validate_callback(session, value, node, path)
        elif isinstance(node, ScalarNode):
            ok, value = self._validate_scalar(session, value, node, path)
        else:
            raise SchemaDefinitionError(
                f"Unsupported schema node type '{type(node).__name__}'", path=path or None
            )

        if node.ref is not None:
            session.refs[node.ref] = value

        if not ok and node.on_failure is not None:
            resolve_callable(node.on_failure, "on_failure hook", path)()
        elif ok and node.on_success is not None:
            resolve_callable(node.on_success, "on_success hook", path)()

        return ok, value

    def _validate_sequence(
        self,
        session: ValidationSession,
        value: Any,
        node: SequenceNode,
        level: int,
        max_depth: int,
        path: str,
    ) -> Tuple[bool, Any]:
        if not isinstance(value, (list, tuple)):
            self._fail(session, node.required, path)
            return False, value

        count = len(value)
        if (node.min_items is not None and count < node.min_items) or (
            node.max_items is not None and count > node.max_items
        ):
            self._fail(session, node.invalid, path)
            return False, value

        item_schema = self.registry.resolve(node.items, path=path or None)

        if node.max_depth is not None:
            max_depth = level + node.max_depth

        items = list(value)
        if node.ref is not None:
            # Later readers see each item as soon as it is sanitized
            session.refs[node.ref] = items
        ok = True
        for idx, item in enumerate(items):
            item_ok, items[idx] = self._validate_node(
                session, item, item_schema, level + 1, max_depth, _index_path(path, idx)
            )
            if not item_ok:
                ok = False
                if self.settings.fail_early:
                    break

        return ok, tuple(items) if isinstance(value, tuple) else items

    def _validate_mapping(
        self,
        session: ValidationSession,
        value: Any,
        node: MappingNode,
        level: int,
        max_depth: int,
        path: str,
    ) -> Tuple[bool, Any]:
        if not isinstance(value, dict):
            self._fail(session, node.required, path)
            return False, value

        if node.properties is None:
            raise SchemaDefinitionError("schema error -- no properties available", path=path or None)

        properties = node.properties
        mode = self.settings.mode
        fail_early = self.settings.fail_early

        if mode is ExtraFields.strict and any(key not in properties for key in value):
            self._fail(session, node.invalid, path)
            return False, value

        ok = True

        # Declared keys missing from the value
        for key, sub_schema in properties.items():
            if key not in value and sub_schema.required is not None:
                self._fail(session, sub_schema.required, _key_path(path, key))
                ok = False
                if fail_early:
                    return False, value

        data = dict(value)
        if node.ref is not None:
            # Later siblings see earlier properties already sanitized
            session.refs[node.ref] = data
        for key, item in value.items():
            if key not in properties:
                if mode is ExtraFields.cleanup:
                    del data[key]
                continue

            item_ok, data[key] = self._validate_node(
                session, item, properties[key], level, max_depth, _key_path(path, key)
            )
            if not item_ok:
                ok = False
                if fail_early:
                    break

        return ok, data

    def _validate_chain(
        self,
        session: ValidationSession,
        value: Any,
        node: ChainNode,
        level: int,
        max_depth: int,
        path: str,
    ) -> Tuple[bool, Any]:
        if node.chain is None:
            raise SchemaDefinitionError("schema error -- no chain available", path=path or None)

        # Without fail_early the last step decides the result
        ok = True
        for step in node.chain:
            ok, value = self._validate_node(session, value, step, level, max_depth, path)
            if not ok and self.settings.fail_early:
                break
        return ok, value

    def _validate_callback(
        self,
        session: ValidationSession,
        value: Any,
        node: CallbackNode,
        path: str,
    ) -> bool:
        callback = resolve_callable(node.callback, "callback", path or None)
        ok = bool(callback(value, session.refs))
        if not ok:
            self._fail(session, node.invalid, path)
        return ok

    def _validate_scalar(
        self,
        session: ValidationSession,
        value: Any,
        node: ScalarNode,
        path: str,
    ) -> Tuple[bool, Any]:
        validator = self._get_type(node, path)
        value = validator.pre_filter(value)

        if isinstance(value, str) and value == "" and node.required is not None:
            self._fail(session, node.required, path)
            return False, value

        if self._encoding is not None and not self._encoding.validate(value):
            self._fail(session, INVALID_ENCODING, path)
            self._fail(session, node.invalid, path)
            return False, value

        ok = bool(validator.validate(value))
        if not ok:
            self._fail(session, node.invalid, path)
        return ok, value

    def _get_type(self, node: ScalarNode, path: str) -> ValidatorType:
        if isinstance(node.validator, ValidatorType):
            return node.validator
        validator = self._types.get(id(node))
        if validator is None:
            validator = create_type(node.validator, node.options, path=path or None)
            self._types[id(node)] = validator
            logger.debug(f"Created validation type {validator!r} for '{path or '<root>'}'")
        return validator

    def __repr__(self) -> str:
        return f"SchemaValidator(schema={list(self.registry)}, data={self.data!r})"


def validate_value(
    value: Any,
    schema: Union[SchemaRegistry, Mapping[str, Any]],
    **kwargs: Any,
) -> ValidationSession:
    """
    Validate a value against a schema in one call.

    Args:
        value: Value to validate
        schema: SchemaRegistry or its declarative dict form
        **kwargs: SchemaValidator settings (mode, fail_early, ...)

    Returns:
        The completed ValidationSession

    Example:
        >>> session = validate_value([1, 2], {"validator": "array", "items": {"validator": "integer"}})
        >>> session.is_valid, session.data
        (True, [1, 2])
    """
    return SchemaValidator(schema, **kwargs).check(value)
