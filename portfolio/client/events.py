# portfolio/client/events.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataUpdated:
    section: Optional[str]
    timestamp: str


Listener = Callable[[DataUpdated], None]


class UpdateNotifier:
    """Same-process subscriptions for 'a section was saved'."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: DataUpdated) -> None:
        log.debug("Notifying %d listeners of update to %s", len(self._listeners), event.section)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # a failing listener does not stop the rest
                log.exception("Update listener failed for section %s", event.section)
