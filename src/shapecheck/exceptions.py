"""
Exception classes for shapecheck.

Two failure classes are kept apart:

- SchemaDefinitionError: the schema itself is broken (an author mistake).
  Raised while validating and never converted into "value invalid".
- ValidationError: optional exception form of an ordinary validation
  failure, for callers that prefer raising over inspecting a session.

This module has no dependencies on the rest of the package so that every
other module can import it freely.
"""

from typing import Any, Dict, List, Optional


class SchemaDefinitionError(Exception):
    """
    Raised when a schema cannot be applied as written.

    Examples: a sequence names an item schema that is not in the registry,
    a mapping has no ``properties``, a chain has no ``chain``, a callback is
    not callable, a scalar validator identifier does not resolve, or the
    registry has no ``default`` entry.

    Attributes:
        path: Location of the offending node within the value being
              validated (e.g. ``"users[2].email"``), when known.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)


class ValidationErrorDetail:
    """
    A single validation failure.

    Attributes:
        message: The error token supplied by the schema author
        path: Dot/bracket path of the value that failed, if tracked
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result: Dict[str, Any] = {"message": self.message}
        if self.path is not None:
            result["path"] = self.path
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationErrorDetail):
            return NotImplemented
        return self.message == other.message and self.path == other.path

    def __repr__(self) -> str:
        return f"ValidationErrorDetail(message={self.message!r}, path={self.path!r})"


class ValidationError(Exception):
    """
    Exception raised when a value does not conform to its schema.

    Carries every error token collected during the validation run.

    Attributes:
        errors: List of ValidationErrorDetail instances
        data: The (partially) sanitized value at the time of failure
    """

    def __init__(self, errors: List[ValidationErrorDetail], data: Any = None):
        self.errors = errors
        self.data = data
        super().__init__(f"Validation failed: {len(errors)} error(s)")

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a response-style dict.

        Returns:
            Dict with:
                - success: False
                - errors: List of error details
        """
        return {
            "success": False,
            "errors": [e.to_dict() for e in self.errors],
        }

    def __repr__(self) -> str:
        return f"ValidationError({len(self.errors)} errors)"
