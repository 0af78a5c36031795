"""
Debug output for signing calls.

Signers report their intermediate strings to a *sink*: any callable taking
``(topic, content)``. The default sink writes to the ``tcsig.log`` logger at
DEBUG level, so nothing is printed unless the application enables it::

    import logging
    logging.basicConfig(level=logging.DEBUG)

Content is always passed through :func:`redact` first.
"""

import logging
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

DebugSink = Callable[[str, str], None]

REDACTED = '[REDACTED]'

_KEEP = 4


def mask(identifier: str) -> str:
    """Keep a short prefix of an identifier such as the SecretId."""
    if len(identifier) <= _KEEP:
        return '***'
    return identifier[:_KEEP] + '***'


def redact(content: str, secrets: Iterable[str] = (), identifiers: Iterable[str] = ()) -> str:
    """Hide credentials in ``content``.

    ``secrets`` (SecretKey, Token) are replaced whole with ``[REDACTED]``;
    ``identifiers`` (SecretId) keep their first four characters.
    """
    replacements = {identifier: mask(identifier) for identifier in identifiers if identifier}
    replacements.update((secret, REDACTED) for secret in secrets if secret)
    # Longest first so a value containing another one is replaced whole.
    for value in sorted(replacements, key=len, reverse=True):
        content = content.replace(value, replacements[value])
    return content


def debug_sink(topic: str, content: str) -> None:
    logger.debug('[DEBUG] %s: %s', topic, content)


def emit(
        sink: DebugSink,
        topic: str,
        content: str,
        secrets: Iterable[str] = (),
        identifiers: Iterable[str] = ()
) -> None:
    sink(topic, redact(content, secrets, identifiers))
