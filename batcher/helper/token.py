"""
Token helpers for the batcher.
Tokens bind a batch id to a caller secret so only that caller can load the batch.
"""

import base64
import hashlib
import hmac
from typing import Any


def hmac_base64(data: Any, key: Any) -> str:
    """
    Calculate a base-64 encoded, URL-safe sha-256 hmac.

    Both values are cast to strings first so the result is never empty.

    :param data: Value to be validated with the hmac.
    :param key: A secret key.
    :returns: The hmac with + replaced by -, / by _ and the = padding removed.
    """
    digest = hmac.new(
        str(key).encode("utf-8"), str(data).encode("utf-8"), hashlib.sha256
    ).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def get_token(value: Any, secret: str) -> str:
    """
    Generate the 43-character access token of a value for the given secret.

    :param value: Value the token is derived from, usually the batch id.
    :param secret: Caller bound secret.
    :returns: URL-safe token.
    """
    return hmac_base64(value, secret)

