"""
Validation session: the mutable state of one validation run.

Holds the collected error tokens, the sanitized value, the overall result
and the reference table shared by every node visited during the walk.
A new session is created for each run, so concurrent runs never share
errors or references.
"""

from typing import Any, Dict, List, Optional

from .exceptions import ValidationError, ValidationErrorDetail


class ValidationSession:
    """
    State accumulated while validating one value.

    Attributes:
        errors: Error tokens in the order they were raised
        details: The same errors with the path of the failing value
        data: Sanitized value (set when the run completes)
        is_valid: Overall result (set when the run completes)
        refs: Reference table; values published by nodes with ``ref``
    """

    def __init__(self):
        self.errors: List[str] = []
        self.details: List[ValidationErrorDetail] = []
        self.data: Any = None
        self.is_valid: bool = False
        self.refs: Dict[str, Any] = {}

    def add_error(self, message: str, path: Optional[str] = None) -> None:
        """Record a validation error token."""
        self.errors.append(message)
        self.details.append(ValidationErrorDetail(message, path=path))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a result dict.

        Returns:
            Dict with:
                - valid: bool - Whether validation passed
                - data: sanitized data (if valid)
                - errors: List of error dicts (if invalid)
        """
        if self.is_valid:
            return {"valid": True, "data": self.data}
        return {
            "valid": False,
            "errors": [d.to_dict() for d in self.details],
        }

    def raise_for_errors(self) -> None:
        """
        Raise ValidationError if the run failed.

        Raises:
            ValidationError: Containing every collected error
        """
        if not self.is_valid:
            raise ValidationError(list(self.details), data=self.data)

    def __repr__(self) -> str:
        return f"ValidationSession(is_valid={self.is_valid}, errors={self.errors!r})"
