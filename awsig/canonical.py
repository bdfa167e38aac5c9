"""
Canonical request construction for Signature Version 4.

Every function here is pure; the signer feeds it the effective header set
(caller headers plus ``X-Amz-Date`` and ``Host``).
"""

import hashlib
from typing import Any, Iterable, List, Mapping, NamedTuple, Tuple, Union

from .encoding import aws_percent_encode, encode_path, query_value

UNSIGNED_PAYLOAD = 'UNSIGNED-PAYLOAD'

Pairs = Iterable[Tuple[str, Any]]
Body = Union[bytes, str, None]


class CanonicalRequest(NamedTuple):
    text: str
    signed_headers: str
    payload_hash: str


def iter_pairs(items: Union[Mapping[str, Any], Pairs, None]) -> List[Tuple[str, Any]]:
    if items is None:
        return []
    if isinstance(items, Mapping):
        return list(items.items())
    return list(items)


def canonical_uri(path: str, double_encode: bool = True) -> str:
    return encode_path(path, double_encode)


def canonical_query_string(query: Union[Mapping[str, Any], Pairs, None]) -> str:
    encoded = [
        (aws_percent_encode(str(key)), aws_percent_encode(query_value(value)))
        for key, value in iter_pairs(query)
    ]
    encoded.sort(key=lambda pair: pair[0] + pair[1])
    return '&'.join(f"{key}={value}" for key, value in encoded)


def normalize_headers(headers: Union[Mapping[str, Any], Pairs, None]) -> List[Tuple[str, str]]:
    """Lower-case names, trim values and sort; the last duplicate wins."""
    merged = {}
    for name, value in iter_pairs(headers):
        merged[name.strip().lower()] = str(value).strip()
    return sorted(merged.items())


def canonical_headers(headers: Union[Mapping[str, Any], Pairs, None]) -> Tuple[str, str]:
    """Return ``(canonical headers block, signed header list)``.

    >>> canonical_headers([('b', '1'), ('A', '2')])
    ('a:2\\nb:1\\n', 'a;b')
    """
    normalized = normalize_headers(headers)
    block = ''.join(f"{name}:{value}\n" for name, value in normalized)
    signed = ';'.join(name for name, _ in normalized)
    return block, signed


def to_bytes(body: Body) -> bytes:
    if body is None:
        return b''
    if isinstance(body, str):
        return body.encode('utf-8')
    return bytes(body)


def payload_hash(body: Body, unsigned: bool = False) -> str:
    if unsigned:
        return UNSIGNED_PAYLOAD
    return hashlib.sha256(to_bytes(body)).hexdigest()


def canonical_request(
        method: str,
        path: str,
        query: Union[Mapping[str, Any], Pairs, None],
        headers: Union[Mapping[str, Any], Pairs, None],
        body: Body,
        double_encode: bool = True,
        unsigned_payload: bool = False,
) -> CanonicalRequest:
    block, signed = canonical_headers(headers)
    digest = payload_hash(body, unsigned_payload)
    text = '\n'.join([
        method.upper(),
        canonical_uri(path, double_encode),
        canonical_query_string(query),
        block,
        signed,
        digest,
    ])
    return CanonicalRequest(text, signed, digest)
