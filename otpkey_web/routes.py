"""
QR VIEWER ROUTES - FLASK BLUEPRINT

Shows one QR code per configured key so they can be scanned into an
authenticator app.

ENDPOINTS:
- GET /                   page with one <img> per key
- GET /image/<index>.png  QR code PNG for the key at <index>
"""

import logging

from flask import Blueprint, Response, abort, current_app, render_template_string

from otpkey.qr import qr_png

logger = logging.getLogger(__name__)

qr_bp = Blueprint("qr", __name__)

PAGE = """<html><body>
{% for label, key in keys %}
<figure>
  <img src="{{ url_for('qr.qr_image', index=loop.index0) }}" width="300px" alt="{{ label }}">
  <figcaption>{{ label }}{% if key.issuer %} ({{ key.issuer }}){% endif %}</figcaption>
</figure>
{% endfor %}
</body></html>"""


def _keys():
    """Keys as an ordered list of (label, Key) pairs."""
    return list(current_app.config["OTPKEY_KEYS"].items())


@qr_bp.route("/", methods=["GET"])
def index():
    return render_template_string(PAGE, keys=_keys())


@qr_bp.route("/image/<int:index>.png", methods=["GET"])
def qr_image(index):
    keys = _keys()
    if index >= len(keys):
        abort(404)
    label, key = keys[index]
    logger.debug("Rendering QR code for %s", label)
    return Response(qr_png(key), mimetype="image/png")
