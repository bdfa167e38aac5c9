"""
Percent-encoding rules used by Signature Version 4.

AWS only leaves the RFC 3986 unreserved characters (``A-Za-z0-9-_.~``)
untouched. ``! * ' ( )`` must be escaped too, which some encoders skip.
"""

from typing import Any, Iterable, Tuple, Union
from urllib.parse import quote

_SAFE_CHARS = '-_.~'


def aws_percent_encode(value: Union[str, bytes]) -> str:
    """Percent-encode ``value`` byte-by-byte over its UTF-8 form.

    >>> aws_percent_encode("Az09-_.~!*'()")
    'Az09-_.~%21%2A%27%28%29'
    >>> aws_percent_encode('bob@example.com')
    'bob%40example.com'
    """
    # quote() treats letters, digits and "_.-~" as always safe
    return quote(value, safe=_SAFE_CHARS)


def encode_path(path: str, double_encode: bool = True) -> str:
    """Encode each ``/``-separated segment of ``path`` independently.

    With ``double_encode`` off the path is returned unchanged (S3).
    """
    if not path:
        return '/'
    if not double_encode:
        return path
    return '/'.join(aws_percent_encode(segment) for segment in path.split('/'))


def query_value(value: Any) -> str:
    """A missing (``None``) value is sent as an empty one."""
    return '' if value is None else str(value)


def encode_query(pairs: Iterable[Tuple[str, Any]]) -> str:
    """Build a query string (or a form body for Query-protocol services).

    Pair order is preserved; sorting is only needed for canonicalization.
    """
    return '&'.join(
        f"{aws_percent_encode(str(key))}={aws_percent_encode(query_value(value))}"
        for key, value in pairs
    )
