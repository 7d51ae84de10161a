"""
key.py — the OTP key value object, its validation rules and constructors.

A Key bundles everything needed to produce codes repeatedly. Instances are
frozen; "changing" a key means building a new one with Key.replace().
"""

from dataclasses import dataclass, replace as dc_replace
from enum import Enum
from typing import List, Optional, Tuple, Union

from otpkey.errors import DecodeError, ValidationError
from otpkey.otp_core import (
    DEFAULT_ALGORITHM,
    DEFAULT_COUNTER,
    DEFAULT_DIGITS,
    DEFAULT_TIME_STEP,
    VALID_DIGITS,
    HashAlgorithm,
    compute_code,
    current_interval,
    decode_secret,
)


class Method(str, Enum):
    TOTP = "totp"
    HOTP = "hotp"

    def __str__(self):
        return self.value


def coerce_method(value):
    """Return the Method for `value`, or `value` unchanged if it names none."""
    if isinstance(value, Method):
        return value
    try:
        return Method(str(value).lower())
    except ValueError:
        return value


def coerce_algorithm(value):
    """Return the HashAlgorithm for `value`, or `value` unchanged if unknown."""
    if isinstance(value, HashAlgorithm):
        return value
    try:
        return HashAlgorithm.from_name(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class Key:
    method: Union[Method, str]
    label: str
    secret: str
    issuer: str = ""
    algorithm: Union[HashAlgorithm, str] = DEFAULT_ALGORITHM
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_TIME_STEP
    counter: int = DEFAULT_COUNTER

    # --- validation ---
    def validate(self) -> "Key":
        """Raise ValidationError listing every broken rule; return self otherwise."""
        errors = validate_key(self)
        if errors:
            raise ValidationError(errors)
        return self

    def is_valid(self) -> bool:
        return not validate_key(self)

    def replace(self, **changes) -> "Key":
        """Return a validated copy with `changes` applied."""
        return dc_replace(self, **changes).validate()

    # --- codes ---
    def get_hotp_code(self, counter: int) -> str:
        return compute_code(self.secret, counter, self.algorithm, self.digits)

    def get_totp_code(self, timestamp: Optional[int] = None) -> str:
        interval, _ = current_interval(self.period, timestamp)
        return self.get_hotp_code(interval)

    def get_code(self, counter: Optional[int] = None, timestamp: Optional[int] = None) -> str:
        """
        Code for this key.

        TOTP keys use the interval containing `timestamp` (default: now).
        HOTP keys need the caller to pass `counter`; the key does not track
        how many codes were already used.
        """
        if self.method == Method.TOTP:
            return self.get_totp_code(timestamp)
        if counter is None:
            raise ValueError("HOTP keys need an explicit counter")
        return self.get_hotp_code(counter)

    def seconds_remaining(self, timestamp: Optional[int] = None) -> int:
        _, remaining = current_interval(self.period, timestamp)
        return remaining

    # --- otpauth:// codec ---
    def to_uri(self) -> str:
        from otpkey.otp_uri import to_uri
        return to_uri(self)

    @classmethod
    def from_uri(cls, uri: str) -> "Key":
        """Parse an otpauth URI without validating the result."""
        from otpkey.otp_uri import from_uri
        return from_uri(uri)

    def __str__(self):
        return self.to_uri()


# --- Validation rules ------------------------------------------------------
def _check_method(k: Key):
    if k.method not in (Method.TOTP.value, Method.HOTP.value):
        return "must be one of {totp, hotp}"


def _check_label(k: Key):
    if not k.label:
        return "missing"
    if not isinstance(k.label, str):
        return "must be text"
    if "/" in k.label:
        return "contains forward slash"


def _check_secret(k: Key):
    if not k.secret:
        return "missing"
    try:
        decode_secret(k.secret)
    except DecodeError:
        return "invalid Base32"


def _check_issuer(k: Key):
    if not k.issuer:
        return None
    if not isinstance(k.issuer, str):
        return "must be text"
    if "/" in k.issuer:
        return "contains forward slash"


def _check_algorithm(k: Key):
    if not isinstance(k.algorithm, HashAlgorithm):
        return "must be one of {%s}" % ", ".join(a.algo_name for a in HashAlgorithm)


def _check_digits(k: Key):
    if isinstance(k.digits, bool) or not isinstance(k.digits, int) or k.digits not in VALID_DIGITS:
        return "must be either 6 or 8"


def _check_period(k: Key):
    if k.method == Method.TOTP.value:
        if isinstance(k.period, bool) or not isinstance(k.period, int) or k.period < 1:
            return "must be positive"


def _check_counter(k: Key):
    if k.method == Method.HOTP.value:
        if isinstance(k.counter, bool) or not isinstance(k.counter, int) or k.counter < 0:
            return "must be a non-negative integer"


_RULES = (
    ("method", _check_method),
    ("label", _check_label),
    ("secret", _check_secret),
    ("issuer", _check_issuer),
    ("algorithm", _check_algorithm),
    ("digits", _check_digits),
    ("period", _check_period),
    ("counter", _check_counter),
)


def validate_key(k: Key) -> List[Tuple[str, str]]:
    """Return (field, message) for every rule `k` breaks; empty when valid."""
    errors = []
    for name, rule in _RULES:
        msg = rule(k)
        if msg:
            errors.append((name, msg))
    return errors


# --- Constructors ----------------------------------------------------------
def _new_key(method, label, secret, issuer, algorithm, digits, period, counter) -> Key:
    k = Key(
        method=coerce_method(method),
        label=label,
        secret=secret.upper() if isinstance(secret, str) else secret,
        issuer=issuer or "",
        algorithm=coerce_algorithm(algorithm),
        digits=digits,
        period=period,
        counter=counter,
    )
    return k.validate()


def new_totp_key(
    label: str,
    secret: str,
    issuer: str = "",
    algorithm: Union[HashAlgorithm, str] = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_TIME_STEP,
) -> Key:
    """
    Build a validated TOTP key.

    Raises:
        ValidationError: any field rule is broken
    """
    return _new_key(Method.TOTP, label, secret, issuer, algorithm, digits, period, DEFAULT_COUNTER)


def new_hotp_key(
    label: str,
    secret: str,
    issuer: str = "",
    algorithm: Union[HashAlgorithm, str] = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
    counter: int = DEFAULT_COUNTER,
) -> Key:
    """
    Build a validated HOTP key. The period keeps its default and is ignored.

    Raises:
        ValidationError: any field rule is broken
    """
    return _new_key(Method.HOTP, label, secret, issuer, algorithm, digits, DEFAULT_TIME_STEP, counter)


def new_key_from_uri(uri: str) -> Key:
    """
    Parse and validate an otpauth URI.

    Raises:
        ParseError: the URI is malformed
        ValidationError: the parsed key breaks a field rule
    """
    return Key.from_uri(uri).validate()
