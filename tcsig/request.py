"""
Turn signer output into a transport-ready request description.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .config import CapiOptions
from .signer_v1 import SignedRequestV1
from .signer_v3 import CONTENT_TYPE, SignedRequestV3

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'

Headers = Dict[str, str]


@dataclass(frozen=True)
class RequestDescriptor:
    url: str
    method: str
    headers: Headers = field(default_factory=dict)
    body: Optional[Union[str, bytes]] = None
    timeout: Optional[float] = None
    verify: bool = True

    def to_dict(self) -> Dict[str, Any]:
        body = self.body.decode('utf-8') if isinstance(self.body, bytes) else self.body
        return {
            'url': self.url,
            'method': self.method,
            'headers': dict(self.headers),
            'body': body,
            'timeout': self.timeout,
            'verify': self.verify,
        }


def build_v3_request(
        signed: SignedRequestV3,
        action: str,
        version: Optional[str],
        options: CapiOptions
) -> RequestDescriptor:
    headers: Headers = {
        'Content-Type': CONTENT_TYPE,
        'Authorization': signed.authorization,
        'Host': signed.host,
        'X-TC-Action': action,
        'X-TC-Version': version or options.version,
        'X-TC-Timestamp': str(signed.timestamp),
        'X-TC-Region': options.region,
    }
    if options.token:
        headers['X-TC-Token'] = options.token
    if options.request_client:
        headers['X-TC-RequestClient'] = options.request_client
    return RequestDescriptor(
        url=signed.url,
        method='POST',
        headers=headers,
        body=signed.body,
        timeout=options.timeout,
        verify=options.verify_tls,
    )


def build_v1_request(signed: SignedRequestV1, options: CapiOptions) -> RequestDescriptor:
    if signed.method == 'POST':
        return RequestDescriptor(
            url=signed.url,
            method=signed.method,
            headers={'Content-Type': FORM_CONTENT_TYPE},
            body=signed.sign_path,
            timeout=options.timeout,
            verify=options.verify_tls,
        )
    return RequestDescriptor(
        url=f'{signed.url}?{signed.sign_path}',
        method=signed.method,
        timeout=options.timeout,
        verify=options.verify_tls,
    )
