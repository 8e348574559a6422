"""Model events concern.

Model не знає про dispatcher напряму - він тримає ModelEvents, який
будує namespaced event names і викликає dispatcher.
"""

from typing import Any, Callable

from wpmodel.config import get_settings
from wpmodel.infrastructure.messaging import (
    EventDispatcher,
    EventOutcome,
    get_event_dispatcher,
)

# Events fired by the model lifecycle
MODEL_EVENTS = (
    "booting",
    "booted",
    "retrieved",
    "saving",
    "saved",
    "creating",
    "created",
    "updating",
    "updated",
    "deleting",
    "deleted",
)


def event_name(object_type: str | None, event: str, prefix: str | None = None) -> str:
    """Build full event name.

    Example:
        >>> event_name("page", "saving", prefix="wp_model")
        'wp_model/page/saving'
    """
    prefix = prefix if prefix is not None else get_settings().event_prefix
    return f"{prefix}/{object_type or ''}/{event}"


class ModelEvents:
    """Fires the events of one model instance.

    Example:
        >>> events = ModelEvents(page, object_type="page")
        >>> if events.until("saving").cancelled:
        ...     return False
        >>> events.fire("saved")
    """

    def __init__(
        self,
        model: Any,
        object_type: str | None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self._model = model
        self._object_type = object_type
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> EventDispatcher:
        # Resolve lazily so reset_event_dispatcher() in tests is picked up
        return self._dispatcher or get_event_dispatcher()

    def name(self, event: str) -> str:
        return event_name(self._object_type, event)

    def fire(self, event: str, *args: Any) -> None:
        """Fire notification event with the model as first payload item."""
        self.dispatcher.dispatch(self.name(event), self._model, *args)

    def until(self, event: str, *args: Any) -> EventOutcome:
        """Fire cancellable event."""
        return self.dispatcher.until(self.name(event), self._model, *args)

    def filter(self, event: str, value: Any, *args: Any) -> Any:
        """Run value through the event filters (model is passed last)."""
        return self.dispatcher.filter(self.name(event), value, *args, self._model)


def listen(object_type: str | None, event: str, callback: Callable[..., Any]) -> None:
    """Register a listener for a model event."""
    get_event_dispatcher().listen(event_name(object_type, event), callback)
