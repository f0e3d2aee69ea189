"""Emitting events about managed objects."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional

from . import log


class EventType(str, Enum):
    """Kind of an event."""

    NORMAL = "Normal"
    WARNING = "Warning"


EventSink = Callable[[Any, EventType, str, str], None]


class Recorder:
    """Sends events about objects to a sink, or to the log when none is given."""

    def __init__(self, component: str, sink: Optional[EventSink] = None) -> None:
        self.component = component
        self._sink = sink if sink is not None else self._log_event

    def emit(self, obj: Any, event_type: EventType, reason: str, message: str) -> None:
        """Emit an event with a ready message."""
        self._sink(obj, EventType(event_type), str(reason), message)

    def emitf(self, obj: Any, event_type: EventType, reason: str, fmt: str, *args: Any) -> None:
        """Emit an event whose message is formatted from fmt and args."""
        message = fmt % args if args else fmt
        self.emit(obj, event_type, reason, message)

    def _log_event(self, obj: Any, event_type: EventType, reason: str, message: str) -> None:
        level = logging.WARNING if event_type is EventType.WARNING else logging.INFO
        log.get_logger().log(
            level, "%s event %s %s on %r: %s", self.component, event_type.value, reason, obj, message
        )