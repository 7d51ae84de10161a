"""
FLASK APP - QR CODE VIEWER
==========================

Builds the small web page `otpkey qrcodes` serves. It only ever listens on
the loopback interface by default: the page embeds every secret in the key
file.
"""

import logging
from typing import Dict

from flask import Flask

from otpkey.key import Key

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def create_app(keys: Dict[str, Key]) -> Flask:
    """Flask app serving QR codes for `keys` (label -> Key)."""
    app = Flask(__name__)
    app.config["OTPKEY_KEYS"] = dict(keys)

    from otpkey_web.routes import qr_bp
    app.register_blueprint(qr_bp)
    return app


def serve(keys: Dict[str, Key], host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    app = create_app(keys)
    logger.info("serving QR codes at http://%s:%d", host, port)
    app.run(host=host, port=port)
