from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import logging
import threading

from .exceptions import SubscriptionAlreadyExists, SubscriptionNotFound
from .models import Identifiable, Subscription

LOGGER = logging.getLogger(__name__)


class SubscriptionManager(Identifiable):
    """
    Indexes subscriptions two ways:
      - subscription id  -> notification name   (membership + reverse lookup)
      - notification     -> bucket of subscriptions, highest priority first,
                            equal priorities kept in insertion order

    The count is maintained on insert/remove so reads are O(1).
    All three structures are guarded by one re-entrant lock per manager.
    """

    def __init__(self, id: str) -> None:
        self._id = id
        self._subscriptions_list: Dict[str, str] = {}
        self._notifications_collection: Dict[str, List[Subscription]] = {}
        self._nb_subscription_recorded = 0
        self._lock = threading.RLock()

    @property
    def id(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r}, subscriptions={self._nb_subscription_recorded})"

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------
    def has_subscription(self, subscription_id: str) -> bool:
        return subscription_id in self._subscriptions_list

    def get_subscriptions(self) -> List[Subscription]:
        with self._lock:
            return [
                subscription
                for bucket in self._notifications_collection.values()
                for subscription in bucket
            ]

    def get_nb_subscriptions(self) -> int:
        return self._nb_subscription_recorded

    def find_subscriptions_by_notification(self, notification: str) -> List[Subscription]:
        """Live bucket for `notification`; copy it before mutating the manager while iterating."""
        return self._notifications_collection.get(notification, [])

    def _find_subscription_index_by_id(self, subscription_id: str) -> Tuple[Optional[str], int]:
        notification = self._subscriptions_list.get(subscription_id)
        if notification is None:
            return None, -1

        bucket = self._notifications_collection.get(notification, [])
        for index, recorded in enumerate(bucket):
            if recorded.id == subscription_id:
                return notification, index
        return notification, -1

    def find_subscription_by_id(self, subscription_id: str) -> Optional[Subscription]:
        with self._lock:
            notification, index = self._find_subscription_index_by_id(subscription_id)
            if index < 0:
                return None
            return self._notifications_collection[notification][index]

    # ------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------
    def add_subscription(self, notification: str, subscription: Subscription) -> None:
        with self._lock:
            if self.has_subscription(subscription.id):
                raise SubscriptionAlreadyExists(subscription.id, self.get_id())

            bucket = self._notifications_collection.setdefault(notification, [])
            bucket.append(subscription)
            # list.sort is stable: equal priorities keep insertion order
            bucket.sort(key=lambda s: s.priority, reverse=True)

            self._subscriptions_list[subscription.id] = notification
            self._nb_subscription_recorded += 1

    def clear_subscription(self, subscription_id: str) -> None:
        """
        Remove a subscription from this manager only.

        Prefer `Subscription.unsubscribe()`: clearing one side leaves the
        other manager still holding the record.
        """
        with self._lock:
            notification, index = self._find_subscription_index_by_id(subscription_id)
            if index < 0:
                raise SubscriptionNotFound(subscription_id, self.get_id())

            bucket = self._notifications_collection[notification]
            removed = bucket.pop(index)
            # drop the closure so whatever it captured can be collected
            removed.handler = None

            del self._subscriptions_list[subscription_id]
            self._nb_subscription_recorded -= 1

            if not bucket:
                del self._notifications_collection[notification]

    def discard_subscription(self, subscription_id: str) -> bool:
        """Clear `subscription_id` if present; returns whether something was removed."""
        with self._lock:
            if not self.has_subscription(subscription_id):
                return False
            self.clear_subscription(subscription_id)
            return True

    def destroy(self) -> None:
        """Unsubscribe everything held here. Call before dropping the manager."""
        subscriptions = self.get_subscriptions()
        for subscription in subscriptions:
            subscription.unsubscribe()
            # records added without back-references only live here
            self.discard_subscription(subscription.id)

        if subscriptions:
            LOGGER.debug("%s destroyed %d subscription(s)", self.get_id(), len(subscriptions))
