"""
Validator settings and their resolution.

Settings can come from four places. Precedence (highest to lowest):

1. Constructor arguments
2. Environment variables (SHAPECHECK_*)
3. The ``settings:`` section of a schema document
4. Defaults

Example usage:
    >>> from shapecheck.config import resolve_settings
    >>> settings = resolve_settings({"mode": "cleanup"}, fail_early=True)
    >>> settings.mode
    <ExtraFields.cleanup: 'cleanup'>
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional

from .types.encoding import DEFAULT_CHARSET

logger = logging.getLogger(__name__)


class ExtraFields(str, Enum):
    """
    Policy for dict keys that a mapping schema does not declare.

    - strict:  undeclared keys make the mapping invalid (default)
    - cleanup: undeclared keys are removed from the sanitized output
    - ignore:  undeclared keys are kept, unvalidated
    """

    strict = "strict"
    cleanup = "cleanup"
    ignore = "ignore"


@dataclass(frozen=True)
class ValidatorSettings:
    """
    Effective configuration of a SchemaValidator.

    Attributes:
        mode: Extra-field policy
        fail_early: Stop at the first failure instead of collecting all
        validate_charset: Check every scalar against ``charset``
        charset: Charset used for encoding checks
        max_depth: Maximum sequence nesting level (0 = unbounded)
    """

    mode: ExtraFields = ExtraFields.strict
    fail_early: bool = False
    validate_charset: bool = True
    charset: str = DEFAULT_CHARSET
    max_depth: int = 0


ENV_MAPPING = {
    "SHAPECHECK_MODE": "mode",
    "SHAPECHECK_FAIL_EARLY": "fail_early",
    "SHAPECHECK_VALIDATE_CHARSET": "validate_charset",
    "SHAPECHECK_CHARSET": "charset",
    "SHAPECHECK_MAX_DEPTH": "max_depth",
}

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off")


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower_val = value.strip().lower()
        if lower_val in _TRUE_STRINGS:
            return True
        if lower_val in _FALSE_STRINGS:
            return False
    raise ValueError(f"Invalid boolean for '{name}': {value!r}")


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw setting value to the type of its field."""
    if name == "mode":
        try:
            return ExtraFields(value)
        except ValueError:
            valid_modes = ", ".join(m.value for m in ExtraFields)
            raise ValueError(f"Invalid mode '{value}'. Must be one of: {valid_modes}")
    if name in ("fail_early", "validate_charset"):
        return _parse_bool(name, value)
    if name == "max_depth":
        if isinstance(value, bool):
            raise ValueError(f"Invalid max_depth: {value!r}")
        try:
            depth = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid max_depth: {value!r}")
        if depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {depth}")
        return depth
    return str(value)


def resolve_settings(
    yaml_settings: Optional[Dict[str, Any]] = None, **overrides: Any
) -> ValidatorSettings:
    """
    Resolve validator settings with proper precedence.

    Args:
        yaml_settings: Optional ``settings`` section of a schema document
        **overrides: Constructor arguments; ``None`` values are skipped

    Returns:
        Resolved ValidatorSettings

    Raises:
        ValueError: If a setting is unknown or has an invalid value
    """
    known = {f.name for f in fields(ValidatorSettings)}
    config: Dict[str, Any] = {}

    # Apply document settings (lowest priority after defaults)
    if yaml_settings:
        for key, value in yaml_settings.items():
            if key not in known:
                raise ValueError(f"Unknown setting '{key}'")
            if value is not None:
                config[key] = _coerce(key, value)

    # Apply environment variables (higher priority)
    for env_var, key in ENV_MAPPING.items():
        env_value = os.getenv(env_var)
        if env_value:
            config[key] = _coerce(key, env_value)

    # Apply constructor parameters (highest priority)
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown setting '{key}'")
        if value is not None:
            config[key] = _coerce(key, value)

    settings = replace(ValidatorSettings(), **config)
    logger.debug(
        f"Validator settings resolved: mode={settings.mode.value}, "
        f"fail_early={settings.fail_early}, "
        f"validate_charset={settings.validate_charset}, "
        f"charset={settings.charset}, max_depth={settings.max_depth}"
    )
    return settings
