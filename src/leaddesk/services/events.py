"""
In-process change notifications.

Services publish events ("lead.updated", "category.deleted", ...) and any
number of callbacks can subscribe to them. A failing subscriber is logged and
skipped; it never breaks the publisher or the other subscribers.
"""
from collections import defaultdict
from typing import Any, Callable, Dict, List

from leaddesk.utils.logging import get_logger

logger = get_logger(__name__)

EventCallback = Callable[[str, Dict[str, Any]], None]

LEAD_UPDATED = "lead.updated"
LEAD_DELETED = "lead.deleted"
LEADS_ASSIGNED = "leads.assigned"
CATEGORY_CREATED = "category.created"
CATEGORY_DELETED = "category.deleted"
WILDCARD = "*"


class EventBus:
    """Synchronous publish/subscribe registry"""

    def __init__(self):
        self._subscribers: Dict[str, List[EventCallback]] = defaultdict(list)

    def subscribe(self, event: str, callback: EventCallback) -> Callable[[], None]:
        """
        Register a callback for an event name ("*" receives everything).

        Returns:
            A function that removes the subscription
        """
        self._subscribers[event].append(callback)

        def unsubscribe() -> None:
            try:
                self._subscribers[event].remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, event: str, payload: Dict[str, Any]) -> int:
        """
        Deliver an event to its subscribers.

        Returns:
            Number of callbacks that ran without raising
        """
        delivered = 0
        for callback in list(self._subscribers.get(event, [])) + list(self._subscribers.get(WILDCARD, [])):
            try:
                callback(event, payload)
                delivered += 1
            except Exception as e:
                logger.warning(f"[yellow]⚠️  Subscriber for {event} failed:[/yellow] {e}")
        return delivered

    def clear(self) -> None:
        self._subscribers.clear()


# Shared bus for the application
event_bus = EventBus()


def log_event(event: str, payload: Dict[str, Any]) -> None:
    """Subscriber that writes every change event to the log"""
    logger.info(f"[magenta]{event}[/magenta] {payload}")
