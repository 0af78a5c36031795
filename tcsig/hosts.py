"""Endpoint resolution shared by both signing generations."""

from typing import Optional


def get_host(
        service_type: str,
        region: str,
        base_host: str,
        host: Optional[str] = None,
        v1: bool = False
) -> str:
    """Return ``host`` if given, otherwise synthesize one.

    V3 endpoints are regional (``cvm.ap-guangzhou.api.qcloud.com``) while V1
    endpoints carry no region segment (``cvm.api.qcloud.com``). The service
    relies on that difference, so it must not be unified.
    """
    if host:
        return host
    if v1:
        return f'{service_type}.{base_host}'
    return f'{service_type}.{region}.{base_host}'


def get_url(host: str, path: Optional[str] = None, protocol: Optional[str] = None) -> str:
    return f'{protocol or "https"}://{host}{path or "/"}'
