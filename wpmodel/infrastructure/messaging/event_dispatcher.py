"""Event Dispatcher - hook infrastructure for model events.

Те саме, що WordPress actions/filters, але з явним результатом:
- dispatch(): notification (як do_action), результат handlers ігнорується
- until(): cancellable check, повертає EventOutcome (PROCEED | CANCEL)
- filter(): value проходить через усі handlers (як apply_filters)

Event names are namespaced strings, e.g. "wp_model/page/saving".
"""

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Handler signature: sync function that takes the event payload
EventHandler = Callable[..., Any]


class EventOutcome(str, Enum):
    """Result of a cancellable event."""

    PROCEED = "proceed"
    """Усі listeners дозволили операцію."""

    CANCEL = "cancel"
    """Хоча б один listener скасував операцію."""

    @property
    def cancelled(self) -> bool:
        return self is EventOutcome.CANCEL


class EventDispatcher:
    """Event Dispatcher для model events.

    Singleton pattern - один instance на application.

    Example:
        >>> dispatcher = EventDispatcher()
        >>> dispatcher.listen("wp_model/page/saving", lambda page: page["post_title"] != "")
        >>> dispatcher.until("wp_model/page/saving", page)
        <EventOutcome.PROCEED: 'proceed'>
    """

    def __init__(self) -> None:
        """Initialize event dispatcher."""
        # Map: event name → list of handlers
        self._listeners: dict[str, list[EventHandler]] = defaultdict(list)
        logger.debug("event_dispatcher.initialized")

    def listen(self, event_name: str, handler: EventHandler) -> None:
        """Subscribe handler to event name.

        Args:
            event_name: Full event name (e.g., "wp_model/page/saved").
            handler: Function to call when event fired.
        """
        self._listeners[event_name].append(handler)
        logger.debug(
            "event_dispatcher.listener_added",
            extra={
                "event_name": event_name,
                "handler": getattr(handler, "__name__", repr(handler)),
            },
        )

    def forget(self, event_name: str, handler: EventHandler | None = None) -> None:
        """Unsubscribe one handler, or all handlers of the event.

        Args:
            event_name: Full event name.
            handler: Handler to remove. None removes every handler.
        """
        if handler is None:
            self._listeners.pop(event_name, None)
            return

        if handler in self._listeners.get(event_name, []):
            self._listeners[event_name].remove(handler)
            logger.debug(
                "event_dispatcher.listener_removed",
                extra={
                    "event_name": event_name,
                    "handler": getattr(handler, "__name__", repr(handler)),
                },
            )

    def has_listeners(self, event_name: str) -> bool:
        return bool(self._listeners.get(event_name))

    def dispatch(self, event_name: str, *payload: Any) -> None:
        """Fire notification event.

        Викликає всі handlers. Якщо handler впав - log і продовжуємо з іншими.

        Args:
            event_name: Full event name.
            *payload: Arguments passed to every handler (model first).
        """
        handlers = list(self._listeners.get(event_name, []))

        if not handlers:
            return

        for handler in handlers:
            try:
                handler(*payload)
            except Exception as e:
                # Log error but continue with other handlers
                logger.error(
                    "event_dispatcher.handler_failed",
                    extra={
                        "event_name": event_name,
                        "handler": getattr(handler, "__name__", repr(handler)),
                        "error": str(e),
                    },
                    exc_info=True,
                )

    def until(self, event_name: str, *payload: Any) -> EventOutcome:
        """Fire cancellable event.

        Handler скасовує операцію поверненням False або EventOutcome.CANCEL.
        Перший cancel зупиняє решту handlers. Exceptions не ковтаються:
        операція, яку перевіряють, не повинна продовжитись "наосліп".

        Args:
            event_name: Full event name.
            *payload: Arguments passed to every handler.

        Returns:
            EventOutcome.CANCEL if any handler cancelled, else PROCEED.
        """
        for handler in list(self._listeners.get(event_name, [])):
            result = handler(*payload)

            if result is False or result is EventOutcome.CANCEL:
                logger.debug(
                    "event_dispatcher.cancelled",
                    extra={
                        "event_name": event_name,
                        "handler": getattr(handler, "__name__", repr(handler)),
                    },
                )
                return EventOutcome.CANCEL

        return EventOutcome.PROCEED

    def filter(self, event_name: str, value: Any, *args: Any) -> Any:
        """Pass value through every handler and return the result.

        Args:
            event_name: Full event name.
            value: Initial value.
            *args: Extra arguments passed after the value.

        Returns:
            Value returned by the last handler (value itself if no handlers).
        """
        for handler in list(self._listeners.get(event_name, [])):
            value = handler(value, *args)

        return value

    def clear(self) -> None:
        """Clear all listeners (useful for testing)."""
        self._listeners.clear()
        logger.debug("event_dispatcher.cleared")


# Singleton instance (можна inject як dependency)
_dispatcher_instance: EventDispatcher | None = None


def get_event_dispatcher() -> EventDispatcher:
    """Get singleton event dispatcher instance.

    Returns:
        EventDispatcher instance.
    """
    global _dispatcher_instance
    if _dispatcher_instance is None:
        _dispatcher_instance = EventDispatcher()
    return _dispatcher_instance


def reset_event_dispatcher() -> None:
    """Reset event dispatcher (for testing).

    Creates new instance, clearing all listeners.
    """
    global _dispatcher_instance
    _dispatcher_instance = EventDispatcher()
    logger.debug("event_dispatcher.reset")
