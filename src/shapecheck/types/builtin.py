"""
Built-in scalar validator types.

A small catalog of common leaf checks. Each accepts its settings through
the ``options`` mapping of the schema node:

    name:
      validator: string
      options: {trim: true, min_length: 1, max_length: 64}
    age:
      validator: integer
      options: {min: 0, max: 150}

Pre-filters coerce obvious string forms ("42" -> 42, "yes" -> True) so that
values coming from query strings or forms validate like native values.
Values that cannot be coerced are passed through unchanged and then fail
validation.
"""

import re
from typing import Any, Union

from .base import ValidatorType


class String(ValidatorType):
    """
    Text value.

    Options:
        trim: Strip surrounding whitespace in pre_filter (default: True)
        min_length: Minimum length
        max_length: Maximum length
    """

    def pre_filter(self, value: Any) -> Any:
        if isinstance(value, str) and self.options.get("trim", True):
            return value.strip()
        return value

    def validate(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        min_length = self.options.get("min_length")
        if min_length is not None and len(value) < min_length:
            return False
        max_length = self.options.get("max_length")
        if max_length is not None and len(value) > max_length:
            return False
        return True


class Pattern(String):
    """
    Text matching a regular expression (full match).

    Options:
        pattern: Regular expression (required)
        flags: Optional string of re flag letters, e.g. "i" for IGNORECASE
        (plus the String options)
    """

    FLAG_LETTERS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}

    def __init__(self, options=None):
        super().__init__(options)
        if "pattern" not in self.options:
            raise ValueError("Pattern validator requires a 'pattern' option")
        flags = 0
        for letter in self.options.get("flags", ""):
            flags |= self.FLAG_LETTERS[letter]
        try:
            self._regex = re.compile(self.options["pattern"], flags)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}") from e

    def validate(self, value: Any) -> bool:
        return super().validate(value) and self._regex.fullmatch(value) is not None


class Email(String):
    """
    E-mail address in the common ``local@domain.tld`` form.

    Not a full RFC 5322 parser: quoted local parts and IP literal domains
    are rejected.
    """

    _LOCAL = r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    _LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    EMAIL_RE = re.compile(rf"^{_LOCAL}@(?:{_LABEL}\.)+[A-Za-z]{{2,63}}$")

    def validate(self, value: Any) -> bool:
        if not super().validate(value) or len(value) > 254:
            return False
        local = value.split("@", 1)[0]
        return len(local) <= 64 and self.EMAIL_RE.match(value) is not None


class Number(ValidatorType):
    """
    Numeric value (int or float, never bool).

    Options:
        min: Minimum value (inclusive)
        max: Maximum value (inclusive)
    """

    def _coerce(self, value: str) -> Union[int, float]:
        return float(value)

    def pre_filter(self, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return self._coerce(value.strip())
            except ValueError:
                return value
        return value

    def _is_number(self, value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def validate(self, value: Any) -> bool:
        if not self._is_number(value):
            return False
        minimum = self.options.get("min")
        if minimum is not None and value < minimum:
            return False
        maximum = self.options.get("max")
        if maximum is not None and value > maximum:
            return False
        return True


class Integer(Number):
    """
    Integer value. Floats with no fractional part are coerced.

    Options: see Number.
    """

    def _coerce(self, value: str) -> int:
        return int(value)

    def pre_filter(self, value: Any) -> Any:
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return super().pre_filter(value)

    def _is_number(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)


class Boolean(ValidatorType):
    """Boolean value. Accepts "true"/"false", "1"/"0", "yes"/"no" strings."""

    TRUE_VALUES = ("true", "1", "yes", "on")
    FALSE_VALUES = ("false", "0", "no", "off")

    def pre_filter(self, value: Any) -> Any:
        if isinstance(value, str):
            lower_val = value.strip().lower()
            if lower_val in self.TRUE_VALUES:
                return True
            elif lower_val in self.FALSE_VALUES:
                return False
        return value

    def validate(self, value: Any) -> bool:
        return isinstance(value, bool)


class Choice(ValidatorType):
    """
    Value must be one of a fixed list.

    Options:
        values: List of allowed values (required)
    """

    def __init__(self, options=None):
        super().__init__(options)
        if "values" not in self.options:
            raise ValueError("Choice validator requires a 'values' option")

    def validate(self, value: Any) -> bool:
        return value in self.options["values"]


BUILTIN_TYPES = {
    "string": String,
    "pattern": Pattern,
    "email": Email,
    "number": Number,
    "integer": Integer,
    "boolean": Boolean,
    "choice": Choice,
}
