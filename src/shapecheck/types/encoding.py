"""
Character encoding validator type.

Consulted by the schema validator for every scalar value when charset
validation is enabled. One instance exists per charset.
"""

import codecs
import logging
import threading
from typing import Any, Dict, Mapping, Optional

from .base import ValidatorType

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"


class Encoding(ValidatorType):
    """
    Checks that a value is representable in a charset.

    - str:   must encode to the charset without errors (this also rejects
             lone surrogates for the UTF family)
    - bytes: must decode from the charset without errors
    - other: accepted, there is no text to check

    Options:
        charset: Charset name understood by ``codecs`` (default: utf-8)
    """

    _instances: Dict[str, "Encoding"] = {}
    _lock = threading.Lock()

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        super().__init__(options)
        charset = self.options.get("charset") or DEFAULT_CHARSET
        # Fail on unknown charsets when the instance is built, not per value
        self.charset = codecs.lookup(charset).name

    @classmethod
    def get_instance(cls, charset: Optional[str] = None) -> "Encoding":
        """
        Return the shared instance for a charset.

        Args:
            charset: Charset name (default: utf-8)

        Raises:
            LookupError: If the charset is unknown
        """
        key = codecs.lookup(charset or DEFAULT_CHARSET).name
        with cls._lock:
            instance = cls._instances.get(key)
            if instance is None:
                instance = cls({"charset": key})
                cls._instances[key] = instance
                logger.debug(f"Created encoding validator for charset '{key}'")
        return instance

    def validate(self, value: Any) -> bool:
        try:
            if isinstance(value, str):
                value.encode(self.charset)
            elif isinstance(value, (bytes, bytearray)):
                bytes(value).decode(self.charset)
        except UnicodeError:
            return False
        return True
