import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

RFC_SECRET = "MFRGGZDFMZTWQ2LK"

KEY_FILE = """\
[key.github]
issuer = "GitHub"
secret = "MFRGGZDFMZTWQ2LK"

[key.bank]
method = "hotp"
secret = "mfrggzdfmztwq2lk"
counter = 3

[key.work]
uri = "otpauth://totp/work?secret=NAR5XTDD3EQU22YU&issuer=Example&algo=SHA256&digits=8&period=60"
"""


@pytest.fixture
def key_file(tmp_path, monkeypatch):
    """A key file with three entries, also exported through OTPKEY_CONFIG."""
    path = tmp_path / "keys.toml"
    path.write_text(KEY_FILE, encoding="utf-8")
    monkeypatch.setenv("OTPKEY_CONFIG", str(path))
    return path
