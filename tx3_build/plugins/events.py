"""Change-event channel between a file watcher and its subscribers."""
from __future__ import annotations
import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

log = logging.getLogger(__name__)

_STOP = object()


@dataclass(frozen=True)
class ChangeEvent:
    path: Path
    kind: str = "change"


Handler = Callable[[ChangeEvent], None]


class Subscription:
    def __init__(self, channel: EventChannel, handler: Handler):
        self._channel = channel
        self.handler = handler

    @property
    def active(self) -> bool:
        return self._channel.is_subscribed(self)

    def unsubscribe(self) -> None:
        self._channel.unsubscribe(self)


class EventChannel:
    """
    Fan-out of ChangeEvents to subscribers.

    Events are either dispatched inline with dispatch(), or published to a
    queue that a single loop (run(), or a thread from start()) drains in order.
    """

    def __init__(self) -> None:
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()
        self._queue: queue.Queue = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def subscribe(self, handler: Handler) -> Subscription:
        subscription = Subscription(self, handler)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def is_subscribed(self, subscription: Subscription) -> bool:
        with self._lock:
            return subscription in self._subscriptions

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def dispatch(self, event: ChangeEvent) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            subscription.handler(event)

    def publish(self, event: ChangeEvent) -> None:
        self._queue.put(event)

    def run(self) -> None:
        """Drain published events until stop() is called."""
        while True:
            event = self._queue.get()
            if event is _STOP:
                return
            try:
                self.dispatch(event)
            except Exception:
                log.exception("Change handler failed for %s", event.path)

    def start(self) -> threading.Thread:
        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self.run, name="tx3-events", daemon=True)
            self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> None:
        self._queue.put(_STOP)
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
