#!/usr/bin/env python3
"""
otp_core.py — code engine for HOTP (RFC 4226) / TOTP (RFC 6238).

Goals:
- Pure functions only: no file I/O, no logging, no process exit.
- The one external input is the wall clock, read in current_interval() and
  overridable through its `timestamp` argument.

Compatibility note:
- The truncated value is always reduced modulo 10**6, also for 8-digit codes,
  which are therefore the 6-digit code left-padded with two zeros. Existing
  callers depend on these exact codes.
"""

from enum import Enum
from typing import Optional, Tuple
import base64
import binascii
import hashlib
import hmac
import struct
import time

import pyotp

from otpkey.errors import DecodeError

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # standard: 6 digits
DEFAULT_TIME_STEP = 30      # TOTP step (seconds)
DEFAULT_COUNTER = 0
CODE_MODULUS = 10 ** 6      # fixed for every digit count, see module docstring
VALID_DIGITS = (6, 8)
_COUNTER_MASK = 0xFFFFFFFFFFFFFFFF


class HashAlgorithm(Enum):
    """
    HMAC hash primitives a key may use.

    Each member pairs the canonical name written to otpauth URIs with the
    hashlib constructor passed to hmac.new().
    """

    SHA1 = ("SHA1", hashlib.sha1)
    SHA256 = ("SHA256", hashlib.sha256)
    SHA512 = ("SHA512", hashlib.sha512)
    MD5 = ("MD5", hashlib.md5)

    def __init__(self, algo_name, digestmod):
        self.algo_name = algo_name
        self.digestmod = digestmod

    def __str__(self):
        return self.algo_name

    @classmethod
    def from_name(cls, name: str) -> "HashAlgorithm":
        """
        Resolve a name such as "sha256" or "SHA256" (case-insensitive).

        Raises:
            ValueError: unknown algorithm name
        """
        wanted = str(name).strip().upper()
        for member in cls:
            if member.algo_name == wanted:
                return member
        raise ValueError(f"Unknown hash algorithm: {name!r}")


DEFAULT_ALGORITHM = HashAlgorithm.SHA1


# --- Utility ---------------------------------------------------------------
def generate_base32_secret() -> str:
    """
    Generate a random Base32 secret (32 characters, 160 bits, no padding).

    Suitable for new_totp_key() / new_hotp_key() and for import into
    Google Authenticator / Authy.
    """
    return pyotp.random_base32()


def decode_secret(secret_b32: str) -> bytes:
    """
    Base32-decode a secret with the standard (upper-case) alphabet.

    Padding must be correct when present; lower-case input is rejected.

    Raises:
        DecodeError: secret is not valid Base32
    """
    try:
        return base64.b32decode(secret_b32)
    except (binascii.Error, ValueError, TypeError) as e:
        raise DecodeError(f"Invalid Base32 secret: {e}") from e


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Pack a counter as the 8-byte big-endian message RFC 4226 requires.

    Values outside the unsigned 64-bit range wrap modulo 2**64.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i & _COUNTER_MASK)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation.

    - offset = low nibble of the last digest byte
    - read 4 bytes from offset as a big-endian integer, clear the sign bit
    - return the 31-bit value

    MD5 digests are only 16 bytes long, so the offset is clamped to keep the
    4-byte window inside the digest. For SHA1/SHA256/SHA512 the clamp never
    applies.
    """
    offset = min(hmac_digest[-1] & 0x0F, len(hmac_digest) - 4)
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


def compute_code(
    secret_b32: str,
    counter: int,
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """
    Compute an HOTP code.

    Steps:
    1. Base32-decode secret -> raw key bytes
    2. Message = 8-byte counter (big-endian)
    3. HMAC(algorithm, key, message)
    4. Dynamic truncate -> 31-bit value
    5. value % 10**6
    6. Zero-pad to `digits` characters

    Arguments:
        secret_b32: Base32 secret
        counter: HOTP counter or TOTP interval
        algorithm: HMAC hash primitive
        digits: length of the returned code

    Returns:
        str: zero-padded code

    Raises:
        DecodeError: secret is not valid Base32
    """
    key = decode_secret(secret_b32)
    msg = int_to_bytes(counter)
    digest = hmac.new(key, msg, algorithm.digestmod).digest()

    dbc = dynamic_truncate(digest)
    otp_val = dbc % CODE_MODULUS
    return str(otp_val).zfill(digits)


def current_interval(period: int, timestamp: Optional[int] = None) -> Tuple[int, int]:
    """
    Return (interval, seconds_remaining) for a TOTP period.

    interval = floor(timestamp / period)
    seconds_remaining = period - (timestamp % period)

    Arguments:
        period: TOTP step in seconds (positive)
        timestamp: epoch seconds (None -> time.time())
    """
    if period < 1:
        raise ValueError("period must be positive")
    if timestamp is None:
        timestamp = int(time.time())
    timestamp = int(timestamp)
    return timestamp // period, period - (timestamp % period)


def totp_code(
    secret_b32: str,
    period: int = DEFAULT_TIME_STEP,
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
    timestamp: Optional[int] = None,
) -> Tuple[str, int]:
    """
    Compute the TOTP code for the current (or given) time.

    Returns:
        (code, remaining_seconds)
    """
    interval, remaining = current_interval(period, timestamp)
    return compute_code(secret_b32, interval, algorithm, digits), remaining
