"""
High level client: merge options, sign, assemble and dispatch.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Protocol, Union

import requests

from .config import CapiOptions
from .exceptions import ConfigurationError
from .log import DebugSink, debug_sink, emit
from .request import RequestDescriptor, build_v1_request, build_v3_request
from .signer_v1 import sign_v1
from .signer_v3 import sign_v3

logger = logging.getLogger(__name__)


class HttpTransport(Protocol):
    def send(self, request: RequestDescriptor) -> Any:
        ...


class RequestsTransport:
    """Send descriptors with :mod:`requests` and decode the JSON response."""

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self.session = session or requests.Session()

    def send(self, request: RequestDescriptor) -> Any:
        response = self.session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            timeout=request.timeout,
            verify=request.verify,
        )
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self.session.close()


class Capi:
    def __init__(
            self,
            options: Union[CapiOptions, Mapping[str, Any], None] = None,
            transport: Optional[HttpTransport] = None,
            sink: Optional[DebugSink] = None
    ) -> None:
        if options is None:
            options = CapiOptions()
        elif not isinstance(options, CapiOptions):
            options = CapiOptions.from_mapping(options)
        self.options = options
        self.transport = transport or RequestsTransport()
        self.sink = sink or debug_sink

    def sign(
            self,
            data: Mapping[str, Any],
            opts: Optional[Mapping[str, Any]] = None,
            use_v3: bool = False,
            timestamp: Optional[int] = None
    ) -> RequestDescriptor:
        """Build the signed request for ``data`` without sending it."""
        options = self.options.merge(opts).validate()
        if use_v3 or options.use_v3:
            body: Dict[str, Any] = dict(data)
            action = body.pop('Action', None)
            if not action:
                raise ConfigurationError('V3 requests need an Action')
            version = body.pop('Version', None)
            signed_v3 = sign_v3(body, options, timestamp=timestamp, sink=self.sink)
            descriptor = build_v3_request(signed_v3, action, version, options)
        else:
            signed_v1 = sign_v1(data, options, timestamp=timestamp, sink=self.sink)
            descriptor = build_v1_request(signed_v1, options)

        if not descriptor.verify:
            logger.warning('TLS certificate verification is disabled for %s', descriptor.url)
        if options.debug:
            emit(self.sink, 'Request Option', json.dumps(descriptor.to_dict()),
                 options.secrets, options.identifiers)
        return descriptor

    def request(
            self,
            data: Mapping[str, Any],
            opts: Optional[Mapping[str, Any]] = None,
            use_v3: bool = False
    ) -> Any:
        """Sign ``data`` and send it with the configured transport."""
        return self.transport.send(self.sign(data, opts, use_v3))
