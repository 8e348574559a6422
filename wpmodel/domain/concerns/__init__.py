"""Model concerns - attributes, events and metadata."""

from .attributes import AttributeStore, is_numeric
from .events import MODEL_EVENTS, ModelEvents, event_name, listen
from .metadata import HasMetadata, Metadata, normalize_mapping

__all__ = [
    "AttributeStore",
    "is_numeric",
    "MODEL_EVENTS",
    "ModelEvents",
    "event_name",
    "listen",
    "HasMetadata",
    "Metadata",
    "normalize_mapping",
]
