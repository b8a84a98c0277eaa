"""Named interaction events and their dispatcher.

Host environments (the browser script, the dashboard, tests) translate their
own input into these events; the map only ever listens here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

POINTER_ENTER = "pointerEnter"
POINTER_LEAVE = "pointerLeave"
TRANSFORM_CHANGED = "transformChanged"

EVENT_TYPES = (POINTER_ENTER, POINTER_LEAVE, TRANSFORM_CHANGED)

Handler = Callable[[Any], None]


@dataclass(frozen=True)
class PointerEvent:
    """Pointer entering or leaving a drawn shape, in client coordinates."""

    client_x: float
    client_y: float
    target: Any = None


@dataclass(frozen=True)
class TransformEvent:
    transform: Any
    previous: Any = None


class EventDispatcher:
    def __init__(self, *types: str):
        self._handlers: dict[str, list[Handler]] = {t: [] for t in (types or EVENT_TYPES)}

    def _listeners(self, event_type: str) -> list[Handler]:
        try:
            return self._handlers[event_type]
        except KeyError:
            raise ValueError(f"Unknown event type: {event_type}") from None

    def on(self, event_type: str, handler: Handler) -> Handler:
        self._listeners(event_type).append(handler)
        return handler

    def off(self, event_type: str, handler: Handler) -> None:
        listeners = self._listeners(event_type)
        if handler in listeners:
            listeners.remove(handler)

    def dispatch(self, event_type: str, payload: Any) -> None:
        listeners = self._listeners(event_type)
        logger.debug("Dispatching %s to %d handlers", event_type, len(listeners))
        for handler in list(listeners):
            handler(payload)
