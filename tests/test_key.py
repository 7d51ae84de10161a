import dataclasses
import time

import pytest

from otpkey.errors import ValidationError
from otpkey.key import Key, Method, new_hotp_key, new_totp_key, validate_key
from otpkey.otp_core import HashAlgorithm

from conftest import RFC_SECRET

GOOD = dict(
    method="totp",
    label="t@w",
    secret=RFC_SECRET,
    issuer="issuer",
    algorithm=HashAlgorithm.SHA1,
    digits=6,
    period=30,
)


def test_new_totp_key():
    k = new_totp_key("label", RFC_SECRET, "issuer", HashAlgorithm.SHA1, 6, 30)
    assert k.method is Method.TOTP
    assert k.label == "label"
    assert k.secret == RFC_SECRET
    assert k.issuer == "issuer"
    assert k.algorithm is HashAlgorithm.SHA1
    assert k.digits == 6
    assert k.period == 30


def test_new_hotp_key():
    k = new_hotp_key("label", RFC_SECRET, "issuer", HashAlgorithm.SHA1, 6, 42)
    assert k.method is Method.HOTP
    assert k.counter == 42


def test_secret_is_upper_cased():
    k = new_totp_key("label", RFC_SECRET.lower())
    assert k.secret == RFC_SECRET


def test_algorithm_by_name():
    assert new_totp_key("label", RFC_SECRET, algorithm="sha512").algorithm is HashAlgorithm.SHA512


def test_defaults():
    k = new_totp_key("label", RFC_SECRET)
    assert (k.issuer, k.algorithm, k.digits, k.period) == ("", HashAlgorithm.SHA1, 6, 30)
    h = new_hotp_key("label", RFC_SECRET)
    assert h.counter == 0


def test_new_totp_key_rejects_bad_secret():
    with pytest.raises(ValidationError):
        new_totp_key("label", "MifdasfsfdsfFRGGZDFMZTWQ2LK", "issuer", HashAlgorithm.SHA1, 6, 30)


def test_new_hotp_key_rejects_bad_digits():
    with pytest.raises(ValidationError):
        new_hotp_key("label", RFC_SECRET, "issuer", HashAlgorithm.SHA1, 7, 0)


@pytest.mark.parametrize("changes", [
    {"method": "crypto!"},
    {"label": ""},
    {"label": "t/w"},
    {"secret": ""},
    {"secret": "abc123"},
    {"issuer": "a/b"},
    {"algorithm": "MD4"},
    {"digits": 99},
    {"digits": 6.0},
    {"digits": True},
    {"period": -42},
    {"period": 0},
    {"method": "hotp", "counter": "abc"},
    {"method": "hotp", "counter": -5},
    {"method": "hotp", "counter": 1.0},
])
def test_bad_keys_fail_validation(changes):
    k = Key(**{**GOOD, **changes})
    assert not k.is_valid()
    with pytest.raises(ValidationError):
        k.validate()


def test_good_key_passes_validation():
    k = Key(**GOOD)
    assert validate_key(k) == []
    assert k.validate() is k


def test_empty_issuer_allowed():
    assert Key(**{**GOOD, "issuer": ""}).is_valid()


def test_hotp_ignores_period():
    assert Key(**{**GOOD, "method": "hotp", "period": -1}).is_valid()


def test_constructors_reject_non_integer_fields():
    with pytest.raises(ValidationError) as excinfo:
        new_totp_key("label", RFC_SECRET, digits=6.0)
    assert excinfo.value.fields == ["digits"]
    with pytest.raises(ValidationError) as excinfo:
        new_hotp_key("label", RFC_SECRET, counter="abc")
    assert excinfo.value.fields == ["counter"]


def test_negative_counter_rejected():
    with pytest.raises(ValidationError):
        new_hotp_key("label", RFC_SECRET, counter=-5)
    with pytest.raises(ValidationError):
        new_hotp_key("label", RFC_SECRET).replace(counter=-1)


def test_validation_reports_every_broken_rule():
    k = Key(method="crypto!", label="", secret="", digits=99)
    with pytest.raises(ValidationError) as excinfo:
        k.validate()
    assert {"method", "label", "secret", "digits"} <= set(excinfo.value.fields)
    assert isinstance(excinfo.value, ValueError)


def test_key_is_immutable():
    k = new_totp_key("label", RFC_SECRET)
    with pytest.raises(dataclasses.FrozenInstanceError):
        k.label = "other"


def test_replace_builds_new_validated_key():
    k = new_hotp_key("label", RFC_SECRET, counter=1)
    k2 = k.replace(counter=2)
    assert k.counter == 1
    assert k2.counter == 2
    with pytest.raises(ValidationError):
        k.replace(digits=5)


def test_hotp_codes():
    k = new_hotp_key("label", RFC_SECRET)
    assert k.get_hotp_code(1) == "765705"
    assert k.get_code(counter=2) == "816065"


def test_hotp_get_code_requires_counter():
    k = new_hotp_key("label", RFC_SECRET)
    with pytest.raises(ValueError):
        k.get_code()


def test_totp_codes_use_current_interval(monkeypatch):
    k = new_totp_key("label", RFC_SECRET, period=30)
    assert k.get_totp_code(timestamp=45) == "765705"
    assert k.get_code(timestamp=60) == "816065"
    assert k.seconds_remaining(timestamp=45) == 15

    monkeypatch.setattr(time, "time", lambda: 31.0)
    assert k.get_code() == "765705"
    assert k.seconds_remaining() == 29


def test_totp_period_changes_interval():
    k = new_totp_key("label", RFC_SECRET, period=60)
    assert k.get_totp_code(timestamp=60) == "765705"


def test_str_is_uri():
    k = new_totp_key("label", RFC_SECRET, "issuer")
    assert str(k) == k.to_uri()
