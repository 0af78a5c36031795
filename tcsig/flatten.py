"""
Parameter flattening.

Nested request parameters are turned into a single level mapping whose keys
are dotted paths, e.g. ``{'Filters': [{'Name': 'zone'}]}`` becomes
``{'Filters.0.Name': 'zone'}``. Both signing generations sign the flattened
form, so leaves are kept as-is (``None`` and ``''`` included) and are only
rendered to strings by :func:`stringify` at serialization time.
"""

import math
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Set, Tuple

from .exceptions import SerializationError

ParameterMap = Mapping[str, Any]
FlatParameterMap = Dict[str, Any]

SCALAR_TYPES = (str, int, float, bool, type(None))


def _is_container(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _children(value: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(value, Mapping):
        for key, child in value.items():
            yield str(key), child
    else:
        for index, child in enumerate(value):
            yield str(index), child


def _walk(value: Any, prefix: Optional[str], seen: Set[int], out: FlatParameterMap) -> None:
    marker = id(value)
    if marker in seen:
        raise SerializationError(f'Circular reference detected at {prefix or "<root>"!r}')
    seen.add(marker)
    for key, child in _children(value):
        path = f'{prefix}.{key}' if prefix else key
        if _is_container(child):
            _walk(child, path, seen, out)
        elif isinstance(child, SCALAR_TYPES):
            out[path] = child
        else:
            raise SerializationError(
                f'Unsupported value of type {type(child).__name__} at {path!r}, '
                'expected a string, number, boolean or None'
            )
    seen.discard(marker)


def flatten(params: ParameterMap) -> FlatParameterMap:
    """Flatten ``params`` into a new ``{dotted.path: scalar}`` dict.

    Mappings contribute ``parent.child`` keys, sequences contribute
    ``parent.<index>`` keys. Empty containers have no leaves and therefore
    vanish. Leaves must be strings, numbers, booleans or ``None``. The input is never modified, and flattening an already flat map
    returns an equal map.
    """
    if not isinstance(params, Mapping):
        raise SerializationError(f'Expected a mapping of parameters, got {type(params).__name__}')
    out: FlatParameterMap = {}
    _walk(params, None, set(), out)
    return out


def stringify(value: Any) -> str:
    """Render a flattened leaf the way the service expects it on the wire."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if math.isnan(value):
            return ''
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer():
            return str(int(value))
    return str(value)
