"""In-process dispatch of reservation events to their handlers."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)


class EventBus:
    """Publish/subscribe bus for reservation events.

    Handlers run synchronously in registration order, standing in for the
    hosting infrastructure's per-event invocation. A failing handler is
    logged with the event it was given and the error propagates to the
    publisher; handlers after it do not run.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type[BaseModel], list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        self._subscribers[event_type].append(handler)

    def publish(self, event: BaseModel) -> None:
        event_name = type(event).__name__
        for handler in self._subscribers.get(type(event), []):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s failed on %s %s",
                    getattr(handler, "__qualname__", handler),
                    event_name,
                    event.model_dump(mode="json"),
                )
                raise
