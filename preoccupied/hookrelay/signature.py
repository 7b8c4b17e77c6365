"""
HMAC signature verification for inbound webhook deliveries.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import hashlib
import hmac
from typing import Optional


SIGNATURE_PREFIX = 'sha256='


def sign_payload(body: bytes, secret: str) -> str:
    """
    Compute the ``sha256=<hexdigest>`` signature of body using secret.
    """

    digest = hmac.new(secret.encode('utf-8'), body, hashlib.sha256).hexdigest()
    return f'{SIGNATURE_PREFIX}{digest}'


def verify_signature(body: bytes, secret: str, signature: Optional[str]) -> bool:
    """
    Check a claimed signature against the one computed from body and
    secret. Lengths are checked first, and only equal-length values
    are compared, in constant time.

    Returns False for a missing or malformed signature rather than
    raising.
    """

    if not isinstance(signature, str):
        return False

    try:
        checksum = signature.encode('ascii')
    except UnicodeEncodeError:
        return False

    digest = sign_payload(body, secret).encode('ascii')

    if len(digest) != len(checksum):
        return False

    return hmac.compare_digest(digest, checksum)


# The end.
