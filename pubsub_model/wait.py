"""
Wait for one or several notifications.

Each awaited (publisher, notification) pair gets a one-shot subscription. When
the last one fires, the handle resolves with the payloads in the order the
records were given, whatever order they were published in.
"""
from __future__ import annotations
from concurrent.futures import Future
from typing import Any, Callable, Iterable, List, Optional
import asyncio
import logging
import threading

from .models import Handler, NotificationRecord, Subscription

LOGGER = logging.getLogger(__name__)


class WaitHandle:
    """Result handle of `wait_until`; resolves on the thread of the last publish."""

    def __init__(self, wait: "WaitUntil") -> None:
        self._wait = wait

    @property
    def future(self) -> Future:
        return self._wait.future

    @property
    def pending(self) -> int:
        return self._wait.pending

    def result(self, timeout: Optional[float] = None) -> List[Any]:
        return self.future.result(timeout)

    def exception(self, timeout: Optional[float] = None):
        return self.future.exception(timeout)

    def done(self) -> bool:
        return self.future.done()

    def cancelled(self) -> bool:
        return self.future.cancelled()

    def add_done_callback(self, fn: Callable[[Future], None]) -> None:
        self.future.add_done_callback(fn)

    def cancel(self) -> bool:
        """Unsubscribe whatever is still pending. False if already resolved."""
        return self._wait.cancel()

    def __await__(self):
        return asyncio.wrap_future(self.future).__await__()


class WaitUntil:
    def __init__(self, subscriber, records: Iterable[NotificationRecord]) -> None:
        self._records = list(records)
        self._total = len(self._records)
        self._payloads: List[Any] = [None] * self._total
        self._fired = [False] * self._total
        self._done = 0
        self._subscriptions: List[Optional[Subscription]] = [None] * self._total
        # re-entrant: done callbacks run under it and may call cancel()
        self._lock = threading.RLock()
        self.future: Future = Future()
        self.handle = WaitHandle(self)

        if not self._records:
            self.future.set_result([])
            return

        try:
            for index, record in enumerate(self._records):
                self._subscriptions[index] = subscriber.subscribe(
                    record.publisher, record.name, self._one_shot(index, record.handler)
                )
        except Exception:
            self._release_pending()
            raise

    @property
    def pending(self) -> int:
        return self._total - self._done

    def _one_shot(self, index: int, handler: Optional[Handler]) -> Handler:
        def on_notification(payload: Any) -> None:
            with self._lock:
                if self._fired[index] or self.future.done():
                    return
                self._fired[index] = True

            try:
                if handler is not None:
                    handler(payload)
            except Exception as exc:
                self._fail(exc)
                return

            self._release(index)
            with self._lock:
                self._payloads[index] = payload
                self._done += 1
                if self._done == self._total and not self.future.done():
                    LOGGER.debug("wait_until resolved with %d payload(s)", self._total)
                    self.future.set_result(list(self._payloads))

        return on_notification

    def _release(self, index: int) -> None:
        subscription = self._subscriptions[index]
        if subscription is not None:
            self._subscriptions[index] = None
            subscription.unsubscribe()

    def _release_pending(self) -> None:
        for index in range(self._total):
            self._release(index)

    def _fail(self, exc: Exception) -> None:
        self._release_pending()
        with self._lock:
            if not self.future.done():
                self.future.set_exception(exc)

    def cancel(self) -> bool:
        with self._lock:
            if not self.future.cancel():
                return False
        self._release_pending()
        LOGGER.debug("wait_until cancelled with %d notification(s) pending", self.pending)
        return True


def subscribe_once(subscriber, publisher, notification: str, handler: Optional[Handler] = None) -> WaitHandle:
    """React to the next `notification` of `publisher` only."""
    return subscriber.wait_until([NotificationRecord(publisher, notification, handler)])
