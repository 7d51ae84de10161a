"""
qr.py — render a key's otpauth URI as a QR code image.

Authenticator apps scan this to import the key. The URI is treated as opaque
text; error correction level H matches what the apps are tested against.
"""

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_H

from otpkey.key import Key


def make_qr_image(key: Key, box_size: int = 10, border: int = 4):
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=box_size, border=border)
    qr.add_data(key.to_uri())
    qr.make(fit=True)
    return qr.make_image(fill_color="black", back_color="white")


def qr_png(key: Key) -> bytes:
    """PNG bytes of the QR code for `key`."""
    img = make_qr_image(key)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def qr_data_uri(key: Key) -> str:
    """The PNG as a data: URI, ready for an <img src=...>."""
    img_str = base64.b64encode(qr_png(key)).decode()
    return f"data:image/png;base64,{img_str}"
