"""
Web package for otpkey: a local Flask page that shows QR codes for the keys
in the key file.
"""

from .app import create_app, serve

__all__ = ["create_app", "serve"]
