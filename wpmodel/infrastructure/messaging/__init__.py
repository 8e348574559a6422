"""Messaging infrastructure (model event hooks)."""

from .event_dispatcher import (
    EventDispatcher,
    EventHandler,
    EventOutcome,
    get_event_dispatcher,
    reset_event_dispatcher,
)

__all__ = [
    "EventDispatcher",
    "EventHandler",
    "EventOutcome",
    "get_event_dispatcher",
    "reset_event_dispatcher",
]
