"""
AWS Signature Version 4 - Standalone Implementation

This package provides a standalone implementation of AWS Signature Version 4
that doesn't depend on botocore for signing operations.
"""

import logging

from .canonical import UNSIGNED_PAYLOAD
from .config import Config
from .encoding import aws_percent_encode, encode_query
from .exceptions import ConfigError, EndpointError, HostHeaderError, SigningError
from .services import Service, ServiceTarget, resolve_endpoint
from .sigv4 import (
    Headers,
    Signature,
    SignedRequest,
    SigV4Signer,
    UnsignedRequest,
    derive_signing_key,
    prepare_request,
    sign,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.2.0"
__all__ = [
    "Config",
    "ConfigError",
    "EndpointError",
    "Headers",
    "HostHeaderError",
    "Service",
    "ServiceTarget",
    "Signature",
    "SignedRequest",
    "SigV4Signer",
    "SigningError",
    "UNSIGNED_PAYLOAD",
    "UnsignedRequest",
    "aws_percent_encode",
    "derive_signing_key",
    "encode_query",
    "prepare_request",
    "resolve_endpoint",
    "sign",
]
