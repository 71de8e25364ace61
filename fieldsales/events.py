"""Typed publish/subscribe bus shared by the engine and its callers.

Topics:
    CategorySelected -> a view asks the MSL catalog to focus one category
    DatasetChanged   -> a commit wrote to a collection; dependent views re-fetch

Handlers are called synchronously, in registration order, for the exact
event type published.
"""

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel

from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.events")

E = TypeVar("E", bound=BaseModel)


class CategorySelected(BaseModel):
    """Focus the MSL view on one store category."""

    category: str


class DatasetChanged(BaseModel):
    """A commit wrote to collection; summary is the commit's counters."""

    collection: str
    summary: dict[str, Any] = {}


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Register handler; returns a callable that removes it."""
        self._handlers.setdefault(event_type, []).append(handler)

        def _unsubscribe() -> None:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return _unsubscribe

    def publish(self, event: BaseModel) -> int:
        """Deliver event; returns the number of handlers called."""
        handlers = list(self._handlers.get(type(event), []))
        logger.debug("events.publish", event_type=type(event).__name__, handlers=len(handlers))
        for handler in handlers:
            handler(event)
        return len(handlers)

    def clear(self) -> None:
        self._handlers.clear()


default_bus = EventBus()
