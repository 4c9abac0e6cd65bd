from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class Category(str, Enum):
    SYSTEM = "system"
    PLAYER = "player"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    ROUND_UPDATE = "round-update"


_event_ids = itertools.count(1)


@dataclass(frozen=True)
class Event:
    category: Category
    text: str
    data: dict = field(default_factory=dict)
    id: int = field(default_factory=lambda: next(_event_ids))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category.value,
            "text": self.text,
            "data": self.data,
        }


class Presenter:
    """
    What a renderer implements to attach to an engine. A chart view
    mostly cares about on_tick, a terminal view mostly about describe.
    """

    def on_tick(self, view: dict):
        pass

    def describe(self, event: Event):
        pass


class EventBus:
    """Fan-out to listeners. A failing listener is logged and skipped."""

    def __init__(self):
        self._listeners = []

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, payload):
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener %r failed", listener)

    def clear(self):
        self._listeners.clear()

    def __len__(self):
        return len(self._listeners)
