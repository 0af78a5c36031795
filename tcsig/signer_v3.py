"""
TC3-HMAC-SHA256 request signing.

The signature covers the HTTP method, the ``content-type`` and ``host``
headers and the SHA-256 of the JSON body. It is keyed by a signing key
derived from the SecretKey through a date and service scoped HMAC chain, so
the raw secret never signs a request directly.
"""

import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from .config import CapiOptions
from .exceptions import SerializationError
from .flatten import FlatParameterMap, flatten
from .hosts import get_host, get_url
from .log import DebugSink, debug_sink, emit

ALGORITHM = 'TC3-HMAC-SHA256'
TERMINATOR = 'tc3_request'
CONTENT_TYPE = 'application/json'
SIGNED_HEADERS = 'content-type;host'


@dataclass(frozen=True)
class SignedRequestV3:
    url: str
    payload: FlatParameterMap
    body: bytes
    host: str
    authorization: str
    timestamp: int
    signature: str


def _hmac_sha256(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode('utf-8'), hashlib.sha256).digest()


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def utc_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime('%Y-%m-%d')


def encode_payload(payload: Mapping[str, Any]) -> bytes:
    """Serialize a flattened payload to the exact bytes that get hashed and sent."""
    try:
        text = json.dumps(payload, separators=(',', ':'), ensure_ascii=False, allow_nan=False)
        return text.encode('utf-8')
    except (TypeError, ValueError) as e:
        raise SerializationError(f'Request payload is not JSON-encodable: {e}') from e


def credential_scope(date: str, service_type: str) -> str:
    return f'{date}/{service_type}/{TERMINATOR}'


def canonical_request(method: str, host: str, body: bytes) -> str:
    # URI is always "/" and the query string is never signed.
    canonical_headers = f'content-type:{CONTENT_TYPE}\nhost:{host}\n'
    return '\n'.join([
        method.upper(),
        '/',
        '',
        canonical_headers,
        SIGNED_HEADERS,
        _sha256_hex(body),
    ])


def string_to_sign(timestamp: int, date: str, service_type: str, request: str) -> str:
    return '\n'.join([
        ALGORITHM,
        str(timestamp),
        credential_scope(date, service_type),
        _sha256_hex(request.encode('utf-8')),
    ])


def derive_signing_key(secret_key: str, date: str, service_type: str) -> bytes:
    secret_date = _hmac_sha256(f'TC3{secret_key}'.encode('utf-8'), date)
    secret_service = _hmac_sha256(secret_date, service_type)
    return _hmac_sha256(secret_service, TERMINATOR)


def compute_signature(signing_key: bytes, to_sign: str) -> str:
    return hmac.new(signing_key, to_sign.encode('utf-8'), hashlib.sha256).hexdigest()


def authorization_header(secret_id: str, date: str, service_type: str, signature: str) -> str:
    return (
        f'{ALGORITHM} Credential={secret_id}/{credential_scope(date, service_type)}, '
        f'SignedHeaders={SIGNED_HEADERS}, Signature={signature}'
    )


def sign_v3(
        params: Mapping[str, Any],
        options: CapiOptions,
        timestamp: Optional[int] = None,
        sink: Optional[DebugSink] = None
) -> SignedRequestV3:
    """Sign ``params`` (the request body, without Action/Version) for TC3."""
    options.validate()
    host = get_host(options.service_type, options.region, options.base_host, options.host)
    url = get_url(host, options.path, options.protocol)
    if timestamp is None:
        timestamp = int(time.time())
    date = utc_date(timestamp)

    payload = flatten(params)
    body = encode_payload(payload)

    request = canonical_request(options.http_method, host, body)
    to_sign = string_to_sign(timestamp, date, options.service_type, request)
    signing_key = derive_signing_key(options.secret_key, date, options.service_type)
    signature = compute_signature(signing_key, to_sign)
    authorization = authorization_header(options.secret_id, date, options.service_type, signature)

    if options.debug:
        sink = sink or debug_sink
        debug: Dict[str, str] = {
            'CanonicalRequest': request,
            'StringToSign': to_sign,
            'Signature': signature,
            'Authorization': authorization,
        }
        for topic, content in debug.items():
            emit(sink, topic, content, options.secrets, options.identifiers)

    return SignedRequestV3(
        url=url,
        payload=payload,
        body=body,
        host=host,
        authorization=authorization,
        timestamp=timestamp,
        signature=signature,
    )
