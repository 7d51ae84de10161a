"""
otpkey package
==============

HOTP (RFC 4226) / TOTP (RFC 6238) code generation and an OTP key model that
round-trips through otpauth:// URIs.

Core algorithm
--------------
- HOTP: code = Truncate(HMAC(hash, key=secret, msg=counter)) mod 10^6,
  zero-padded to the requested number of digits.
- TOTP: HOTP with counter = floor(timestamp / period).
- Dynamic truncation: 4 bytes from the digest at offset (last byte & 0x0F).

Quick example
-------------
>>> from otpkey import new_totp_key, compute_code
>>> compute_code("MFRGGZDFMZTWQ2LK", 1)
'765705'
>>> key = new_totp_key("label", "MFRGGZDFMZTWQ2LK", issuer="issuer")
>>> key.to_uri()
'otpauth://totp/label?algo=SHA1&digits=6&issuer=issuer&period=30&secret=MFRGGZDFMZTWQ2LK'
"""

from otpkey.errors import ConfigError, DecodeError, OTPError, ParseError, ValidationError
from otpkey.otp_core import (
    HashAlgorithm,
    compute_code,
    current_interval,
    generate_base32_secret,
    totp_code,
)
from otpkey.key import (
    Key,
    Method,
    new_hotp_key,
    new_key_from_uri,
    new_totp_key,
    validate_key,
)
from otpkey.otp_uri import from_uri, to_uri

__all__ = [
    "ConfigError",
    "DecodeError",
    "HashAlgorithm",
    "Key",
    "Method",
    "OTPError",
    "ParseError",
    "ValidationError",
    "compute_code",
    "current_interval",
    "from_uri",
    "generate_base32_secret",
    "new_hotp_key",
    "new_key_from_uri",
    "new_totp_key",
    "to_uri",
    "totp_code",
    "validate_key",
]
