"""
Tencent Cloud API request signing - Standalone Implementation

This package signs requests for both the legacy query-string scheme (V1)
and TC3-HMAC-SHA256 (V3), and assembles them into transport-ready request
descriptors. Sending is left to a pluggable HTTP transport.
"""

from .client import Capi, HttpTransport, RequestsTransport
from .config import CapiOptions
from .exceptions import CapiError, ConfigurationError, SerializationError
from .flatten import flatten
from .request import RequestDescriptor
from .signer_v1 import SignedRequestV1, sign_v1
from .signer_v3 import SignedRequestV3, sign_v3

__version__ = "0.1.0"
__all__ = [
    "Capi",
    "CapiOptions",
    "CapiError",
    "ConfigurationError",
    "HttpTransport",
    "RequestDescriptor",
    "RequestsTransport",
    "SerializationError",
    "SignedRequestV1",
    "SignedRequestV3",
    "flatten",
    "sign_v1",
    "sign_v3",
]
