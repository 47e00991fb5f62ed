"""Synchronous event bus between the composer session and its renderers.

The session publishes one event per visible-state change; the Textual app
(and test recorders) subscribe by event class. Delivery happens inline,
inside the session call that caused the change, so handlers must be plain
functions. A handler that needs to await schedules its own task.
"""

import asyncio
from collections import defaultdict
from typing import Callable, Type, TypeVar

from deskpilot.logger import get_logger

from .types import Event

logger = get_logger("events.bus")

T = TypeVar("T", bound=Event)
Handler = Callable[[Event], None]


class EventBus:
    """Routes each published event to the handlers of its exact class.

    Single event loop only; no locking.
    """

    def __init__(self) -> None:
        self._routes: defaultdict[Type[Event], list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """
        Register ``handler`` for ``event_type``; subscribing twice is a no-op.

        Raises:
            TypeError: If ``handler`` is a coroutine function
        """
        if asyncio.iscoroutinefunction(handler):
            raise TypeError(
                f"{event_type.__name__} handler {getattr(handler, '__name__', handler)!r} is async; "
                f"bus handlers run inline and must be plain functions"
            )
        route = self._routes[event_type]
        if handler in route:
            return
        route.append(handler)
        logger.debug(f"{event_type.__name__}: {len(route)} handler(s)")

    def publish(self, event: Event) -> None:
        """Deliver ``event`` in subscription order.

        A failing handler is logged and skipped; the rest still run.
        """
        for handler in tuple(self._routes.get(type(event), ())):
            try:
                handler(event)
            except Exception:
                logger.exception(f"{type(event).__name__} handler failed")
