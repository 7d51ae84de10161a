"""
config.py — read named key definitions from a TOML key file.

The file is maintained by the user; otpkey only reads it (and writes the
commented template on `otpkey init`). Each [key.<label>] table either holds
the key fields or a single `uri` entry:

    [key.github]
    issuer = "GitHub"
    secret = "MFRGGZDFMZTWQ2LK"

    [key.bank]
    uri = "otpauth://hotp/bank?secret=MFRGGZDFMZTWQ2LK&counter=3"
"""

from pathlib import Path
from typing import Dict, Optional, Union
import logging
import os
import tomllib

from otpkey.errors import ConfigError, OTPError
from otpkey.key import Key, Method, new_hotp_key, new_key_from_uri, new_totp_key
from otpkey.otp_core import DEFAULT_ALGORITHM, DEFAULT_COUNTER, DEFAULT_DIGITS, DEFAULT_TIME_STEP

logger = logging.getLogger(__name__)

CONFIG_ENV = "OTPKEY_CONFIG"
CONFIG_FILE = ".otpkey.toml"

CONFIG_TEMPLATE = """\
# otpkey configuration
#
# Example:
#
# [key.label]
# issuer = "The Issuer"
# secret = "<Base32 encoded secret key>"
#
# Optional fields: algo ("SHA1", "SHA256", "SHA512", "MD5"), digits (6 or 8),
# period (TOTP seconds), method ("totp" or "hotp"), counter (HOTP).
# A table may instead hold a single otpauth URI:
#
# [key.other]
# uri = "otpauth://totp/other?secret=<Base32 encoded secret key>"
"""

PathLike = Union[str, os.PathLike]


def get_config_path(path: Optional[PathLike] = None) -> Path:
    """Explicit path, else $OTPKEY_CONFIG, else ~/.otpkey.toml."""
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / CONFIG_FILE


def init_config(path: Optional[PathLike] = None) -> bool:
    """
    Write the commented template if the key file does not exist yet.

    Returns:
        bool: True if the file was created, False if it already existed.
    """
    cfg_path = get_config_path(path)
    if cfg_path.exists():
        logger.debug("%s exists, leaving it untouched", cfg_path)
        return False
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    with open(cfg_path, "w", encoding="utf-8") as f:
        f.write(CONFIG_TEMPLATE)
    logger.debug("Created key file template at %s", cfg_path)
    return True


def key_from_entry(label: str, entry: dict) -> Key:
    """
    Build a validated Key from one [key.<label>] table.

    Raises:
        OTPError: the entry does not describe a valid key
    """
    if "uri" in entry:
        return new_key_from_uri(entry["uri"])

    method = str(entry.get("method", Method.TOTP.value)).lower()
    common = dict(
        label=label,
        secret=entry.get("secret", ""),
        issuer=entry.get("issuer", ""),
        algorithm=entry.get("algo", DEFAULT_ALGORITHM),
        digits=entry.get("digits", DEFAULT_DIGITS),
    )
    if method == Method.HOTP.value:
        return new_hotp_key(counter=entry.get("counter", DEFAULT_COUNTER), **common)
    if method == Method.TOTP.value:
        return new_totp_key(period=entry.get("period", DEFAULT_TIME_STEP), **common)
    raise ConfigError(f"key {label!r}: method must be totp or hotp, got {method!r}")


def load_keys(path: Optional[PathLike] = None) -> Dict[str, Key]:
    """
    Load every key from the key file, sorted by label.

    Raises:
        ConfigError: file missing / not TOML / an entry is not a valid key
    """
    cfg_path = get_config_path(path)
    try:
        with open(cfg_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        raise ConfigError(f"key file not found: {cfg_path} (run 'otpkey init')") from None
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{cfg_path}: {e}") from e

    tables = data.get("key", {})
    if not isinstance(tables, dict):
        raise ConfigError(f"{cfg_path}: 'key' must be a table")

    keys = {}
    for label in sorted(tables):
        entry = tables[label]
        if not isinstance(entry, dict):
            raise ConfigError(f"{cfg_path}: key {label!r} must be a table")
        try:
            keys[label] = key_from_entry(label, entry)
        except ConfigError:
            raise
        except OTPError as e:
            raise ConfigError(f"{cfg_path}: key {label!r}: {e}") from e
    logger.debug("Loaded %d key(s) from %s", len(keys), cfg_path)
    return keys
