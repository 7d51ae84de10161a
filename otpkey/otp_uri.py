"""
otp_uri.py — otpauth:// URI codec for Key.

Format: otpauth://{method}/{label}?{params}

Query parameters are written sorted by name, the order urlencode() keeps
when fed a sorted list, so serializing the same key always gives the same
text:

    otpauth://totp/label?algo=SHA1&digits=6&issuer=issuer&period=30&secret=MFRGGZDFMZTWQ2LK
    otpauth://hotp/label?algo=SHA1&counter=42&digits=6&issuer=issuer&secret=MFRGGZDFMZTWQ2LK

Parsing applies defaults for omitted parameters (algo=SHA1, digits=6,
period=30, counter=0) and does not validate; new_key_from_uri() does.
"""

import re
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

from otpkey.errors import ParseError
from otpkey.key import Key, Method, coerce_algorithm
from otpkey.otp_core import (
    DEFAULT_ALGORITHM,
    DEFAULT_COUNTER,
    DEFAULT_DIGITS,
    DEFAULT_TIME_STEP,
    HashAlgorithm,
)

SCHEME = "otpauth"
_LABEL_SAFE = ":@"
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _algo_name(algorithm) -> str:
    if isinstance(algorithm, HashAlgorithm):
        return algorithm.algo_name
    return str(algorithm).upper()


def to_uri(key: Key) -> str:
    params = {
        "secret": key.secret,
        "algo": _algo_name(key.algorithm),
        "digits": key.digits,
    }
    if key.issuer:
        params["issuer"] = key.issuer
    if key.method == Method.TOTP:
        params["period"] = key.period
    elif key.method == Method.HOTP:
        params["counter"] = key.counter

    query = urlencode(sorted(params.items()))
    return f"{SCHEME}://{key.method}/{quote(key.label, safe=_LABEL_SAFE)}?{query}"


def _get_int(params: dict, name: str, default: int) -> int:
    value = params.get(name)
    if not value:
        return default
    if not _INTEGER.fullmatch(value):
        raise ParseError(f"{name} is non-integer")
    return int(value)


def from_uri(uri: str) -> Key:
    """
    Parse an otpauth URI into a Key (unvalidated).

    Raises:
        ParseError: malformed URI, userinfo or port in the authority, wrong
            scheme, unknown method, empty label,
            or a non-integer digits/period/counter value
    """
    if not isinstance(uri, str):
        raise ParseError("URI must be text")
    try:
        parts = urlsplit(uri.strip())
        host = parts.hostname or ""
    except ValueError as e:
        raise ParseError(f"malformed URI: {e}") from e

    if parts.scheme.lower() != SCHEME:
        raise ParseError("invalid scheme")
    if parts.netloc.lower() != host:
        raise ParseError("unexpected userinfo or port in authority")

    try:
        method = Method(host.lower())
    except ValueError:
        raise ParseError(f"invalid method {host!r}") from None

    label = unquote(parts.path[1:] if parts.path.startswith("/") else parts.path)
    if not label:
        raise ParseError("missing label")

    # first value wins for repeated parameters
    params = {name: values[0] for name, values in parse_qs(parts.query, keep_blank_values=True).items()}

    algo = params.get("algo")
    algorithm = coerce_algorithm(algo) if algo else DEFAULT_ALGORITHM

    digits = _get_int(params, "digits", DEFAULT_DIGITS)

    period, counter = DEFAULT_TIME_STEP, DEFAULT_COUNTER
    if method is Method.TOTP:
        period = _get_int(params, "period", DEFAULT_TIME_STEP)
    else:
        counter = _get_int(params, "counter", DEFAULT_COUNTER)

    return Key(
        method=method,
        label=label,
        secret=params.get("secret", "").upper(),
        issuer=params.get("issuer", ""),
        algorithm=algorithm,
        digits=digits,
        period=period,
        counter=counter,
    )
