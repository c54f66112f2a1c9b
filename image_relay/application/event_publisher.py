"""
Event Publisher

Application service for publishing domain events to registered handlers.
Enables decoupling of side effects from core business logic.
"""

import logging
from threading import Lock
from typing import Callable, Dict, List, Type

from ..domain.events import DomainEvent

logger = logging.getLogger(__name__)


class EventPublisher:
    """
    Event publisher that dispatches domain events to registered handlers.

    Dispatch is synchronous. Handler exceptions are caught and logged so a
    side effect can never break a pipeline run or a serve request.

    Thread-safe for concurrent event publishing.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[Callable[[DomainEvent], None]]] = {}
        self._lock = Lock()

    def subscribe(
        self,
        event_type: Type[DomainEvent],
        handler: Callable[[DomainEvent], None]
    ) -> None:
        """
        Register a handler for a specific event type.

        Args:
            event_type: The type of domain event to handle
            handler: Callable that accepts the event as parameter
        """
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            logger.debug(
                f"Registered handler {getattr(handler, '__name__', repr(handler))} "
                f"for {event_type.__name__}"
            )

    def publish(self, event: DomainEvent) -> None:
        """
        Publish an event to all registered handlers.

        Handlers subscribed to a base class (e.g. DomainEvent) receive every
        event deriving from it.

        Args:
            event: The domain event to publish
        """
        event_type = type(event)

        with self._lock:
            handlers = [
                handler
                for klass in event_type.__mro__
                for handler in self._handlers.get(klass, [])
            ]

        if not handlers:
            logger.debug(f"No handlers registered for {event_type.__name__}")
            return

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # Log but don't fail - side effects should not break core logic
                logger.error(
                    f"Error in handler {getattr(handler, '__name__', repr(handler))} "
                    f"for {event_type.__name__}: {e}",
                    exc_info=True
                )

    def clear(self) -> None:
        """Remove every handler (tests)."""
        with self._lock:
            self._handlers.clear()
