"""
AWS Signature Version 4 request signing.

``sign`` is a pure function of its arguments: it never reads the clock and
keeps nothing between calls. ``SigV4Signer`` binds credentials and a service
for callers that sign many requests, and keeps the URL-based
``create_headers`` entry point.
"""

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from .canonical import UNSIGNED_PAYLOAD, Body, canonical_request, iter_pairs, to_bytes
from .config import Config
from .encoding import encode_query
from .exceptions import HostHeaderError
from .services import (
    Service,
    ServiceTarget,
    Target,
    double_encode_path,
    resolve_endpoint,
    service_name,
    signing_region,
)

logger = logging.getLogger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'
SCOPE_TERMINATOR = 'aws4_request'
AMZ_DATE_FORMAT = '%Y%m%dT%H%M%SZ'
SCOPE_DATE_FORMAT = '%Y%m%d'

Headers = Dict[str, Any]
HeaderPairs = Tuple[Tuple[str, str], ...]
Timestamp = Union[datetime, int]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_TOKEN_PREFIX = 'x-amz-security-token:'


@dataclass(frozen=True)
class UnsignedRequest:
    """A request as the caller built it, before signing.

    ``headers`` and ``query`` are ordered pairs (a mapping is accepted too).
    ``Host`` must not be among the headers.
    """

    method: str = 'GET'
    headers: Union[Mapping[str, Any], Sequence[Tuple[str, Any]]] = ()
    query: Union[Mapping[str, Any], Sequence[Tuple[str, Any]]] = ()
    body: Body = b''
    unsigned_payload: bool = False

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive lookup; the last matching header wins."""
        found = None
        for key, value in iter_pairs(self.headers):
            if key.strip().lower() == name.lower():
                found = value
        return found


@dataclass(frozen=True)
class Signature:
    signature: str
    credential_scope: str
    headers: HeaderPairs
    signed_headers: str
    authorization: str
    algorithm: str = ALGORITHM
    canonical_request: str = field(default='', repr=False)
    string_to_sign: str = field(default='', repr=False)


@dataclass(frozen=True)
class SignedRequest:
    """Everything a transport needs to send the signed request."""

    method: str
    url: str
    headers: HeaderPairs
    body: bytes = b''
    timeout: Optional[float] = None

    def transport_headers(self, managed: Iterable[str] = ('host', 'content-type')) -> HeaderPairs:
        """Drop the headers the transport sets on its own."""
        skip = {name.lower() for name in managed}
        return tuple((name, value) for name, value in self.headers if name.lower() not in skip)

    def header_dict(self) -> Dict[str, str]:
        return dict(self.headers)


def to_utc(timestamp: Timestamp) -> datetime:
    """Normalize a datetime (naive means UTC) or epoch milliseconds to UTC."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp.astimezone(timezone.utc)
    if isinstance(timestamp, int) and not isinstance(timestamp, bool):
        return _EPOCH + timedelta(milliseconds=timestamp)
    raise TypeError(f"Expected a datetime or epoch milliseconds, got {type(timestamp).__name__}")


def _hmac_sha256(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode('utf-8'), hashlib.sha256).digest()


def derive_signing_key(secret_key: str, date: str, region: str, service: str) -> bytes:
    """Fold HMAC-SHA256 over the scope parts, starting from ``AWS4`` + secret."""
    key = f"AWS4{secret_key}".encode('utf-8')
    for part in (date, region, service, SCOPE_TERMINATOR):
        key = _hmac_sha256(key, part)
    return key


def _redact(canonical_text: str) -> str:
    lines = canonical_text.split('\n')
    for i, line in enumerate(lines):
        if line.startswith(_TOKEN_PREFIX):
            lines[i] = _TOKEN_PREFIX + '***'
    return '\n'.join(lines)


def _effective_headers(
        request: UnsignedRequest,
        amz_date: str,
        host: str,
        session_token: Optional[str],
) -> HeaderPairs:
    # last one wins, at the position it last occurred
    latest = {}
    for name, value in iter_pairs(request.headers):
        name = name.strip()
        lname = name.lower()
        if lname == 'host':
            raise HostHeaderError(str(value))
        if lname == 'x-amz-date' or (session_token and lname == 'x-amz-security-token'):
            continue
        latest.pop(lname, None)
        latest[lname] = (name, str(value))
    headers = list(latest.values())
    headers.append(('X-Amz-Date', amz_date))
    headers.append(('Host', host))
    if session_token:
        headers.append(('X-Amz-Security-Token', session_token))
    return tuple(headers)


def sign(config: Config, service: Union[Target, str], timestamp: Timestamp, request: UnsignedRequest) -> Signature:
    """Sign ``request`` for ``service`` at ``timestamp``.

    :raises HostHeaderError: if the request already carries a ``Host`` header.
    :raises EndpointError: if no endpoint or signing region can be resolved.
    """
    endpoint = resolve_endpoint(service, config.region)
    name = service_name(service)
    region = signing_region(service, config.region)

    when = to_utc(timestamp)
    amz_date = when.strftime(AMZ_DATE_FORMAT)
    scope_date = when.strftime(SCOPE_DATE_FORMAT)

    headers = _effective_headers(request, amz_date, endpoint.host, config.session_token)
    credential_scope = '/'.join([scope_date, region, name, SCOPE_TERMINATOR])

    canonical = canonical_request(
        request.method,
        endpoint.path,
        request.query,
        headers,
        request.body,
        double_encode=double_encode_path(service),
        unsigned_payload=request.unsigned_payload,
    )
    logger.debug('CanonicalRequest:\n%s', _redact(canonical.text))

    string_to_sign = '\n'.join([
        ALGORITHM,
        amz_date,
        credential_scope,
        hashlib.sha256(canonical.text.encode('utf-8')).hexdigest(),
    ])
    logger.debug('StringToSign:\n%s', string_to_sign)

    signing_key = derive_signing_key(config.secret_key, scope_date, region, name)
    signature = hmac.new(signing_key, string_to_sign.encode('utf-8'), hashlib.sha256).hexdigest()
    logger.debug('Signature:\n%s', signature)

    authorization = (
        f"{ALGORITHM} "
        f"Credential={config.access_key}/{credential_scope}, "
        f"SignedHeaders={canonical.signed_headers}, "
        f"Signature={signature}"
    )
    return Signature(
        signature=signature,
        credential_scope=credential_scope,
        headers=headers,
        signed_headers=canonical.signed_headers,
        authorization=authorization,
        canonical_request=canonical.text,
        string_to_sign=string_to_sign,
    )


def prepare_request(
        config: Config,
        service: Union[Target, str],
        timestamp: Timestamp,
        request: UnsignedRequest,
) -> SignedRequest:
    """Sign ``request`` and assemble what the transport layer sends."""
    signature = sign(config, service, timestamp, request)
    endpoint = resolve_endpoint(service, config.region)
    query = encode_query(iter_pairs(request.query))
    url = f"{endpoint.url}?{query}" if query else endpoint.url
    return SignedRequest(
        method=request.method.upper(),
        url=url,
        headers=(('Authorization', signature.authorization),) + signature.headers,
        body=to_bytes(request.body),
        timeout=config.timeout,
    )


def _target_for_url(service: Union[Target, str], url: str) -> ServiceTarget:
    if isinstance(service, ServiceTarget):
        service = service.service
    elif isinstance(service, str):
        try:
            service = Service(service)
        except ValueError:
            pass
    return ServiceTarget(service, url)


class SigV4Signer:
    """Signs requests for one service with one set of credentials."""

    def __init__(
            self,
            access_key: str,
            secret_key: str,
            region: Optional[str],
            service: Union[Target, str],
            token: Optional[str] = None,
            timeout: Optional[float] = None,
    ) -> None:
        self.config = Config(
            secret_key=secret_key,
            region=region,
            access_key=access_key,
            timeout=timeout,
            session_token=token,
        )
        self.service = service

    @classmethod
    def from_config(cls, config: Config, service: Union[Target, str]) -> 'SigV4Signer':
        return cls(
            config.access_key,
            config.secret_key,
            config.region,
            service,
            config.session_token,
            config.timeout,
        )

    def __repr__(self) -> str:
        return f"SigV4Signer(config={self.config!r}, service={self.service!r})"

    def sign(self, request: UnsignedRequest, timestamp: Timestamp) -> Signature:
        return sign(self.config, self.service, timestamp, request)

    def prepare_request(self, request: UnsignedRequest, timestamp: Timestamp) -> SignedRequest:
        return prepare_request(self.config, self.service, timestamp, request)

    def create_headers(
            self,
            method: str,
            url: str,
            headers: Optional[Headers] = None,
            body: Body = None,
            timestamp: Optional[Timestamp] = None,
    ) -> Headers:
        """Return the headers to send for ``method`` on ``url``.

        The query string is taken from ``url``. The current time is used when
        ``timestamp`` is omitted.
        """
        parts = urlsplit(url)
        target = _target_for_url(self.service, urlunsplit((parts.scheme, parts.netloc, parts.path, '', '')))
        request = UnsignedRequest(
            method=method,
            headers=tuple((headers or {}).items()),
            query=tuple(parse_qsl(parts.query, keep_blank_values=True)),
            body=body,
        )
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)
        signature = sign(self.config, target, timestamp, request)

        result = dict(signature.headers)
        result['Authorization'] = signature.authorization
        return result


__all__ = [
    'ALGORITHM',
    'UNSIGNED_PAYLOAD',
    'Headers',
    'Signature',
    'SignedRequest',
    'SigV4Signer',
    'UnsignedRequest',
    'derive_signing_key',
    'prepare_request',
    'sign',
    'to_utc',
]
