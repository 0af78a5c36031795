"""Errors raised while preparing a signed request."""


class CapiError(Exception):
    """Base class for every error raised by tcsig."""


class ConfigurationError(CapiError, ValueError):
    """Options are missing or invalid for the requested signing call."""


class SerializationError(CapiError, ValueError):
    """Parameters cannot be flattened or encoded into a canonical form."""
