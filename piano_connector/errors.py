"""Failures returned by the connector entry points.

Every error is a ``ValueError`` so callers that only care about "the event
could not be mapped" can catch that; ``str(error)`` is the message handed back
to the host.
"""


class PianoError(ValueError):
    """Base class for every mapping failure."""


class MissingConfiguration(PianoError):
    """A required destination setting (site id, collection domain) is absent."""


class DataVariantMismatch(PianoError):
    """The event data is not the variant the operation expects."""


class RequiredFieldMissing(PianoError):
    """The event is missing a field the operation cannot do without."""


class UnsupportedOperation(PianoError):
    """The operation is disabled for this connector."""
