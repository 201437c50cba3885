from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TYPE_CHECKING
from enum import Enum, auto
import logging
import threading

from . import config

if TYPE_CHECKING:
    from .subscription_manager import SubscriptionManager
    from .publisher import Publisher


LOGGER = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class ExceptionPolicy(Enum):
    CONTINUE = auto()   # swallow handler errors, keep dispatching
    STOP = auto()       # re-raise, abort the current dispatch


class Identifiable:
    """Anything carrying a stable string `id`; equality and hashing go by id."""

    id: str

    def get_id(self) -> str:
        return self.id

    def is_id(self, identifier: str) -> bool:
        return identifier == self.get_id()

    def __eq__(self, other):
        if not isinstance(other, Identifiable):
            return NotImplemented
        return self.get_id() == other.get_id()

    def __hash__(self):
        return hash(self.get_id())


@dataclass(eq=False)
class Subscription:
    """
    One handler bound to a (publisher, notification) pair.

    The same record is indexed twice: in the publisher's manager (for dispatch)
    and in the subscriber's manager (for bulk teardown). `unsubscribe()` drops
    both entries in one call and then releases the handler, so closures captured
    by the handler can be collected even if someone still holds the record.
    """
    id: str
    subscriber_id: str
    publisher_id: str
    notification: str
    handler: Optional[Handler]
    priority: float = config.DEFAULT_PRIORITY

    # -------------------------------
    # Back-references (owning managers)
    # -------------------------------
    publisher: Optional["SubscriptionManager"] = field(default=None, repr=False)
    subscriber: Optional["SubscriptionManager"] = field(default=None, repr=False)

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def get_id(self) -> str:
        return self.id

    def is_id(self, identifier: str) -> bool:
        return identifier == self.id

    # records only compare with records, never with the entities sharing an id
    def __eq__(self, other):
        if not isinstance(other, Subscription):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    @property
    def active(self) -> bool:
        return self.handler is not None

    def unsubscribe(self) -> None:
        with self._lock:
            managers = []
            for manager in (self.publisher, self.subscriber):
                if manager is not None and all(manager is not m for m in managers):
                    managers.append(manager)

            removed = [manager.discard_subscription(self.id) for manager in managers]
            if any(removed):
                LOGGER.debug(
                    "Unsubscribed %s from %r (publisher=%s, subscriber=%s)",
                    self.id, self.notification, self.publisher_id, self.subscriber_id,
                )

            self.publisher = None
            self.subscriber = None
            self.handler = None


@dataclass
class NotificationRecord:
    """One entry of a `wait_until` request."""
    publisher: "Publisher"
    name: str
    handler: Optional[Handler] = None
