"""
URL helpers for the batcher polling endpoints.
"""

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def build_url(url: str, **query: Any) -> str:
    """
    Merge query parameters into a URL.
    Existing parameters are kept, parameters with the same name are replaced.

    :param url: Base URL, optionally with a query string.
    :param query: Parameters to set.
    :returns: The URL with the merged query string.
    """
    parts = urlsplit(url)
    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    for key, value in query.items():
        params[key] = str(value)

    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(params), parts.fragment)
    )
