"""
Catalog change notifications.

An explicit observer registry: interested parties subscribe a callback and
receive typed ProductRefreshEvent objects when products are imported,
created, updated or deleted.
"""

from dataclasses import dataclass, field
from typing import Callable, Literal, Optional
import time
import structlog

logger = structlog.get_logger(__name__)

RefreshEventType = Literal["import", "create", "update", "delete"]


@dataclass(frozen=True)
class ProductRefreshEvent:
    """One catalog change."""
    type: RefreshEventType
    timestamp: float
    count: Optional[int] = None
    product_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "timestamp": self.timestamp,
            "count": self.count,
            "product_ids": list(self.product_ids),
        }


Listener = Callable[[ProductRefreshEvent], None]


class ProductRefreshEvents:
    """
    Publish/subscribe registry for ProductRefreshEvent.

    A failing listener is logged and skipped; the others still get the event.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._listeners: list[Listener] = []
        self._last_event: Optional[ProductRefreshEvent] = None
        self._clock = clock

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def emit(
        self,
        event_type: RefreshEventType,
        count: Optional[int] = None,
        product_ids: Optional[list[str]] = None
    ) -> ProductRefreshEvent:
        """Build an event, remember it and notify every listener."""
        event = ProductRefreshEvent(
            type=event_type,
            timestamp=self._clock(),
            count=count,
            product_ids=list(product_ids or []),
        )
        self._last_event = event

        logger.info(
            "product_refresh_event",
            type=event_type,
            count=count,
            listeners=len(self._listeners)
        )

        for callback in list(self._listeners):
            try:
                callback(event)
            except Exception as e:
                logger.error(
                    "refresh_listener_failed",
                    type=event_type,
                    error=str(e),
                    error_type=type(e).__name__
                )

        return event

    @property
    def last_event(self) -> Optional[ProductRefreshEvent]:
        return self._last_event

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def has_recent_event(self, max_age_seconds: float = 5.0) -> bool:
        """True if the last event is younger than ``max_age_seconds``."""
        if self._last_event is None:
            return False
        return self._clock() - self._last_event.timestamp < max_age_seconds


_refresh_events: Optional[ProductRefreshEvents] = None

def get_refresh_events() -> ProductRefreshEvents:
    """Get or create the application's ProductRefreshEvents instance."""
    global _refresh_events
    if _refresh_events is None:
        _refresh_events = ProductRefreshEvents()
    return _refresh_events
