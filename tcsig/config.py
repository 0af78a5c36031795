"""
Immutable client configuration.

A :class:`CapiOptions` value is assembled once per call: the client keeps a
base value and every request merges its overrides into a fresh copy, so no
signing state is ever shared between calls.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError

DEFAULT_BASE_HOST = 'api.qcloud.com'
DEFAULT_REGION = 'ap-guangzhou'
DEFAULT_VERSION = '2018-03-21'

SIGNATURE_METHODS = ('sha1', 'sha256')

# Option spellings accepted by from_mapping(), mapped onto field names.
_ALIASES = {
    'serviceType': 'service_type',
    'ServiceType': 'service_type',
    'region': 'region',
    'Region': 'region',
    'secretId': 'secret_id',
    'SecretId': 'secret_id',
    'secretKey': 'secret_key',
    'SecretKey': 'secret_key',
    'token': 'token',
    'Token': 'token',
    'host': 'host',
    'baseHost': 'base_host',
    'path': 'path',
    'protocol': 'protocol',
    'method': 'method',
    'signatureMethod': 'signature_method',
    'SignatureMethod': 'signature_method',
    'requestClient': 'request_client',
    'RequestClient': 'request_client',
    'timeout': 'timeout',
    'debug': 'debug',
    'useV3': 'use_v3',
    'isV3': 'use_v3',
    'verifyTls': 'verify_tls',
    'version': 'version',
}


@dataclass(frozen=True)
class CapiOptions:
    service_type: str = ''
    region: str = DEFAULT_REGION
    secret_id: str = field(default='', repr=False)
    secret_key: str = field(default='', repr=False)
    token: Optional[str] = field(default=None, repr=False)
    host: Optional[str] = None
    base_host: str = DEFAULT_BASE_HOST
    path: str = '/'
    protocol: str = 'https'
    method: str = 'POST'
    signature_method: str = 'sha1'
    request_client: Optional[str] = None
    version: str = DEFAULT_VERSION
    # Seconds; handed to the transport untouched.
    timeout: Optional[float] = None
    debug: bool = False
    use_v3: bool = False
    # Set to False only for endpoints that still serve legacy certificates.
    verify_tls: bool = True

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'CapiOptions':
        """Build options from camelCase, PascalCase or snake_case keys."""
        return cls(**_normalize(mapping))

    @classmethod
    def from_env(cls, **overrides: Any) -> 'CapiOptions':
        """Read credentials from ``TENCENTCLOUD_*`` environment variables."""
        values: Dict[str, Any] = {}
        env = {
            'secret_id': 'TENCENTCLOUD_SECRET_ID',
            'secret_key': 'TENCENTCLOUD_SECRET_KEY',
            'token': 'TENCENTCLOUD_SESSION_TOKEN',
            'region': 'TENCENTCLOUD_REGION',
        }
        for name, variable in env.items():
            value = os.environ.get(variable)
            if value:
                values[name] = value
        values.update(_normalize(overrides))
        return cls(**values)

    def merge(self, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> 'CapiOptions':
        """Return a copy with ``overrides`` applied; ``self`` is left untouched.

        ``None`` values in the overrides are ignored so that partially filled
        per-call option dicts don't wipe the base configuration.
        """
        changes = _normalize(dict(overrides or {}, **kwargs))
        changes = {name: value for name, value in changes.items() if value is not None}
        if not changes:
            return self
        return dataclasses.replace(self, **changes)

    def validate(self) -> 'CapiOptions':
        missing = [name for name in ('service_type', 'secret_id', 'secret_key') if not getattr(self, name)]
        if missing:
            raise ConfigurationError(f'Missing required option(s): {", ".join(missing)}')
        if self.signature_method not in SIGNATURE_METHODS:
            raise ConfigurationError(
                f'Unsupported signature method {self.signature_method!r}, '
                f'expected one of {", ".join(SIGNATURE_METHODS)}'
            )
        if not self.host and not self.base_host:
            raise ConfigurationError('Either host or base_host must be set')
        return self

    @property
    def http_method(self) -> str:
        return (self.method or 'POST').upper()

    @property
    def secrets(self) -> tuple:
        """Key material that is fully redacted from any log output."""
        return tuple(value for value in (self.secret_key, self.token) if value)

    @property
    def identifiers(self) -> tuple:
        """Credential identifiers, logged only as a short prefix."""
        return (self.secret_id,) if self.secret_id else ()


_FIELDS = frozenset(f.name for f in dataclasses.fields(CapiOptions))


def _normalize(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, value in mapping.items():
        name = key if key in _FIELDS else _ALIASES.get(key)
        if name is None:
            raise ConfigurationError(f'Unknown option {key!r}')
        values[name] = value
    return values
