"""
Service targets and endpoint resolution.

A target is either one of the built-in :class:`Service` members or a
:class:`ServiceTarget` carrying an explicit endpoint URL (and, for services
without a built-in mapping, an arbitrary signing name).
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Union
from urllib.parse import urlsplit, urlunsplit

from .exceptions import EndpointError

GLOBAL_REGION = 'us-east-1'

_DEFAULT_PORTS = {'http': 80, 'https': 443}


class Service(Enum):
    """Built-in services, valued by their signing name."""

    IAM = 'iam'
    DYNAMODB = 'dynamodb'
    SES = 'ses'
    STS = 'sts'
    EC2 = 'ec2'
    LAMBDA = 'lambda'
    SQS = 'sqs'
    S3 = 's3'

    @property
    def endpoint_prefix(self) -> Optional[str]:
        # None means the caller must supply a URL
        return _ENDPOINT_PREFIXES.get(self)

    @property
    def is_global(self) -> bool:
        return self in _GLOBAL_SERVICES

    @property
    def double_encode_path(self) -> bool:
        return self is not Service.S3


_ENDPOINT_PREFIXES = {
    Service.IAM: 'iam',
    Service.DYNAMODB: 'dynamodb',
    Service.SES: 'email',
    Service.STS: 'sts',
    Service.EC2: 'ec2',
    Service.LAMBDA: 'lambda',
}

_GLOBAL_SERVICES = frozenset([Service.IAM])


@dataclass(frozen=True)
class ServiceTarget:
    """A service addressed through an explicit endpoint URL.

    ``service`` is either a built-in :class:`Service` (S3 and SQS always need
    one of these since their URL depends on the bucket or queue) or the
    signing name of a service with no built-in mapping, e.g. ``execute-api``.
    """

    service: Union[Service, str]
    url: Optional[str] = None

    @classmethod
    def custom(cls, name: str, url: str) -> 'ServiceTarget':
        return cls(name, url)

    @classmethod
    def s3(cls, url: str) -> 'ServiceTarget':
        return cls(Service.S3, url)

    @classmethod
    def sqs(cls, url: str) -> 'ServiceTarget':
        return cls(Service.SQS, url)


Target = Union[Service, ServiceTarget]


class Endpoint(NamedTuple):
    url: str
    host: str
    path: str


def as_target(target: Union[Target, str]) -> ServiceTarget:
    if isinstance(target, ServiceTarget):
        return target
    if isinstance(target, Service):
        return ServiceTarget(target)
    if isinstance(target, str):
        try:
            return ServiceTarget(Service(target))
        except ValueError:
            raise EndpointError(
                f"Unknown service {target!r}; use ServiceTarget.custom() with an endpoint URL"
            ) from None
    raise TypeError(f"Expected a Service or ServiceTarget, got {type(target).__name__}")


def service_name(target: Union[Target, str]) -> str:
    """Return the name used in the credential scope."""
    service = as_target(target).service
    if isinstance(service, Service):
        return service.value
    if not service or not service.strip():
        raise EndpointError("Custom service name must not be empty")
    return service


def double_encode_path(target: Union[Target, str]) -> bool:
    service = as_target(target).service
    if isinstance(service, Service):
        return service.double_encode_path
    return True


def signing_region(target: Union[Target, str], region: Optional[str]) -> str:
    """Return the region used in the credential scope.

    Global services always sign for ``us-east-1``.
    """
    service = as_target(target).service
    if isinstance(service, Service) and service.is_global:
        return GLOBAL_REGION
    if not region:
        raise EndpointError(f"A region is required to sign requests for {service_name(target)!r}")
    return region


def resolve_endpoint(target: Union[Target, str], region: Optional[str]) -> Endpoint:
    """Resolve the endpoint URL, ``Host`` value and path for ``target``."""
    target = as_target(target)
    if target.url is not None:
        return parse_endpoint(target.url)

    service = target.service
    if not isinstance(service, Service):
        raise EndpointError(f"Custom service {service!r} requires an endpoint URL")
    prefix = service.endpoint_prefix
    if prefix is None:
        raise EndpointError(f"Service {service.value!r} requires an explicit endpoint URL")
    if service.is_global:
        host = f"{prefix}.amazonaws.com"
    elif region:
        host = f"{prefix}.{region}.amazonaws.com"
    else:
        raise EndpointError(f"Cannot resolve an endpoint for {service.value!r} without a region")
    return Endpoint(f"https://{host}/", host, '/')


def parse_endpoint(url: str) -> Endpoint:
    parts = urlsplit(url)
    if not parts.hostname:
        raise EndpointError(f"Endpoint URL {url!r} has no host")
    host = parts.hostname
    if ':' in host:
        host = f"[{host}]"
    try:
        port = parts.port
    except ValueError as e:
        raise EndpointError(f"Endpoint URL {url!r} has an invalid port") from e
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme):
        host = f"{host}:{port}"
    path = parts.path or '/'
    # the query travels with the request, never with the endpoint
    return Endpoint(urlunsplit((parts.scheme, parts.netloc, path, '', '')), host, path)
