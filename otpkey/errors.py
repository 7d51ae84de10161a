"""
errors.py — exception types raised by the otpkey core.

All of them subclass ValueError: they describe bad input (a secret, a URI, a
key definition), never a transient condition, so nothing here is retried.
"""

from typing import List, Tuple


class OTPError(ValueError):
    """Base class for every error raised by otpkey."""


class DecodeError(OTPError):
    """The secret is not valid Base32."""


class ParseError(OTPError):
    """The text is not a usable otpauth:// URI."""


class ValidationError(OTPError):
    """
    A key violates one or more field rules.

    `errors` holds (field, message) pairs in the order the rules were checked.
    """

    def __init__(self, errors: List[Tuple[str, str]]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors))

    @property
    def fields(self) -> List[str]:
        return [field for field, _ in self.errors]


class ConfigError(OTPError):
    """The key file is missing, unreadable or holds an unusable entry."""
