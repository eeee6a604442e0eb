from piano_connector.config import PianoSettings, load_settings
from piano_connector.connector import PianoConnector, build_edgee_request, page, track, user
from piano_connector.errors import (
    DataVariantMismatch,
    MissingConfiguration,
    PianoError,
    RequiredFieldMissing,
    UnsupportedOperation,
)
from piano_connector.models import EdgeeRequest, Event

__all__ = [
    "DataVariantMismatch",
    "EdgeeRequest",
    "Event",
    "MissingConfiguration",
    "PianoConnector",
    "PianoError",
    "PianoSettings",
    "RequiredFieldMissing",
    "UnsupportedOperation",
    "build_edgee_request",
    "load_settings",
    "page",
    "track",
    "user",
]
