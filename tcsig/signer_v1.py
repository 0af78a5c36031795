"""
Legacy (V1) query-string signing.

Public parameters are injected into the request, everything is flattened and
sorted, and ``METHOD + HOST + PATH + '?' + query`` is signed with HMAC-SHA1
(or HMAC-SHA256 when ``signature_method='sha256'``). The base64 digest is
sent back as the ``Signature`` parameter.
"""

import base64
import hashlib
import hmac
import math
import secrets
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import quote, urlencode

from .config import CapiOptions
from .exceptions import SerializationError
from .flatten import FlatParameterMap, flatten, stringify
from .hosts import get_host, get_url
from .log import DebugSink, debug_sink, emit

REQUEST_CLIENT = 'SDK_PYTHON_tcsig'
NONCE_MAX = 65535

# Characters left unescaped in the final form/query string.
_FORM_SAFE = "!*'()"

_DIGESTS = {
    'sha1': hashlib.sha1,
    'sha256': hashlib.sha256,
}


@dataclass(frozen=True)
class SignedRequestV1:
    url: str
    method: str
    sign_path: str
    canonical_query: str
    payload: FlatParameterMap
    host: str
    signature: str


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def canonical_query_string(params: Mapping[str, Any], method: str) -> str:
    """Build the sorted ``key=value`` string that gets signed.

    Values are not URL-encoded here.
    """
    method = method.upper()
    pairs = []
    for key in sorted(params):
        if key == '':
            continue
        # The service signs keys with underscores rewritten to dots unless the
        # key *starts* with one, and then reads the value back under the
        # rewritten key. For most underscore keys that lookup misses and the
        # value signs as empty. This is what the live endpoint verifies
        # against, so it is kept as is.
        if key.find('_') != 0:
            key = key.replace('_', '.')
        value = params.get(key)
        if method == 'POST' and isinstance(value, str) and value.startswith('@'):
            # legacy file upload marker
            continue
        pairs.append(f'{key}={stringify(value)}')
    return '&'.join(pairs)


def hmac_digest(message: str, secret_key: str, algorithm: str = 'sha1') -> str:
    digest = hmac.new(secret_key.encode('utf-8'), message.encode('utf-8'), _DIGESTS[algorithm]).digest()
    return base64.b64encode(digest).decode('ascii')


def _form_value(value: Any) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        return ''
    return stringify(value)


def encode_form(params: Mapping[str, Any]) -> str:
    """URL-encode ``params`` in insertion order, spaces as ``%20``."""
    return urlencode(
        [(key, _form_value(value)) for key, value in params.items()],
        quote_via=quote,
        safe=_FORM_SAFE,
    )


def sign_v1(
        params: Mapping[str, Any],
        options: CapiOptions,
        timestamp: Optional[int] = None,
        nonce: Optional[int] = None,
        sink: Optional[DebugSink] = None
) -> SignedRequestV1:
    """Sign ``params`` (Action and Version included) with the legacy scheme."""
    options.validate()
    host = get_host(options.service_type, options.region, options.base_host, options.host, v1=True)
    path = options.path or '/'
    url = get_url(host, path, options.protocol)
    method = options.http_method

    payload = dict(params)
    payload['Region'] = options.region
    payload['Nonce'] = secrets.randbelow(NONCE_MAX + 1) if nonce is None else nonce
    payload['Timestamp'] = int(time.time()) if timestamp is None else timestamp
    payload['SecretId'] = options.secret_id
    payload['RequestClient'] = REQUEST_CLIENT
    if options.signature_method == 'sha256':
        payload['SignatureMethod'] = 'HmacSHA256'

    flat = flatten(payload)
    query = canonical_query_string(flat, method)
    to_sign = f'{method}{host}{path}?{query}'
    try:
        signature = hmac_digest(to_sign, options.secret_key, options.signature_method)
        flat['Signature'] = signature
        sign_path = encode_form(flat)
    except UnicodeEncodeError as e:
        raise SerializationError(f'Request parameters are not UTF-8 encodable: {e}') from e

    if options.debug:
        sink = sink or debug_sink
        emit(sink, 'CanonicalQueryString', query, options.secrets, options.identifiers)
        emit(sink, 'StringToSign', to_sign, options.secrets, options.identifiers)

    return SignedRequestV1(
        url=url,
        method=method,
        sign_path=sign_path,
        canonical_query=query,
        payload=flat,
        host=host,
        signature=signature,
    )
