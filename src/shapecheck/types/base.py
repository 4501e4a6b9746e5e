"""
Scalar validator type interface.

Every leaf check used by a ScalarNode is an instance of ValidatorType.
The schema validator only ever calls two methods:

- pre_filter(value): normalize the value before checking (trim, coerce)
- validate(value):   return True if the pre-filtered value is acceptable

The pre-filtered value becomes part of the sanitized output.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional


class ValidatorType(ABC):
    """
    Abstract base class for scalar validator types.

    Subclasses receive the node's ``options`` mapping in their constructor.

    Example:
        class PostCode(ValidatorType):
            def pre_filter(self, value):
                return value.strip().upper() if isinstance(value, str) else value

            def validate(self, value):
                return isinstance(value, str) and len(value) == 5
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        self.options: Dict[str, Any] = dict(options or {})

    def pre_filter(self, value: Any) -> Any:
        """Normalize value before validation. Identity by default."""
        return value

    @abstractmethod
    def validate(self, value: Any) -> bool:
        """
        Check a pre-filtered value.

        Args:
            value: Value returned by pre_filter

        Returns:
            True if the value is valid
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.options!r})"
