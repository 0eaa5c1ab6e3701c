"""TOTP helpers for the two-factor endpoints (pyotp + segno)."""
from __future__ import annotations

import re

import pyotp
import segno

ISSUER = "BookKeeper Pro"
ACCOUNT_LABEL = "International Bookkeeping"

_CODE_RE = re.compile(r"[0-9]{6}")


def generate_setup(label: str = ACCOUNT_LABEL) -> dict[str, str]:
    """Create a fresh secret and a PNG data-URI QR code of its provisioning URI."""
    secret = pyotp.random_base32()
    uri = pyotp.TOTP(secret).provisioning_uri(name=label, issuer_name=ISSUER)
    qr_code = segno.make(uri, error="m").png_data_uri(scale=4)
    return {"secret": secret, "qrCode": qr_code, "otpauthUrl": uri}


def is_well_formed(code: str | None) -> bool:
    return bool(code) and _CODE_RE.fullmatch(code) is not None


def verify_code(secret: str, code: str) -> bool:
    """Check ``code`` against the current TOTP window, one step of drift allowed."""
    return pyotp.TOTP(secret).verify(code, valid_window=1)
