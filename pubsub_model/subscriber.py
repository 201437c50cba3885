from __future__ import annotations
from typing import Iterable, List
import logging
import math
import numbers

from . import config
from .exceptions import InvalidArgument, PubSubError
from .helpers import Role, find_subscriptions_by_role_and_component_id
from .models import Handler, NotificationRecord, Subscription
from .subscription_manager import SubscriptionManager
from .wait import WaitHandle, WaitUntil

LOGGER = logging.getLogger(__name__)


def _check_priority(priority) -> None:
    if (
        isinstance(priority, bool)
        or not isinstance(priority, numbers.Real)
        or (not isinstance(priority, numbers.Integral) and math.isnan(priority))
    ):
        raise InvalidArgument(f"priority must be a number, got {priority!r}")


class Subscriber(SubscriptionManager):
    """
    Keeps its own index of the subscriptions it created on publishers, so it
    can drop them by publisher id or notification name without asking every
    publisher.
    """

    @property
    def as_subscriber(self) -> "Subscriber":
        return self

    def subscribe(
        self,
        publisher,
        notification: str,
        handler: Handler,
        priority: float = config.DEFAULT_PRIORITY,
    ) -> Subscription:
        _check_priority(priority)
        if not callable(handler):
            raise InvalidArgument(f"handler must be callable, got {handler!r}")

        target = publisher.as_publisher
        subscription = Subscription(
            id=config.new_subscription_id(self.get_id(), target.get_id(), notification),
            subscriber_id=self.get_id(),
            publisher_id=target.get_id(),
            notification=notification,
            handler=handler,
            priority=priority,
            publisher=target,
            subscriber=self,
        )

        target.add_subscriber(notification, subscription)
        try:
            self.add_subscription(notification, subscription)
        except PubSubError:
            target.discard_subscription(subscription.id)
            raise

        LOGGER.debug(
            "%s subscribed to %r on %s (priority=%s)",
            self.get_id(), notification, target.get_id(), priority,
        )
        return subscription

    # ------------------------------------------------------------
    # Unsubscription (both sides)
    # ------------------------------------------------------------
    def unsubscribe_from_subscription_id(self, subscription_id: str) -> None:
        """Unknown ids are ignored so teardown can run twice."""
        subscription = self.find_subscription_by_id(subscription_id)
        if subscription is None:
            LOGGER.debug("%s: nothing to unsubscribe for %s", self.get_id(), subscription_id)
            return
        subscription.unsubscribe()

    def unsubscribe_from_publisher_id(self, publisher_id: str) -> None:
        self._unsubscribe_all(self.find_subscription_by_publisher_id(publisher_id))

    def unsubscribe_from_notification(self, notification: str) -> None:
        self._unsubscribe_all(list(self.find_subscriptions_by_notification(notification)))

    def _unsubscribe_all(self, subscriptions: Iterable[Subscription]) -> None:
        count = 0
        for subscription in subscriptions:
            subscription.unsubscribe()
            count += 1
        if count:
            LOGGER.debug("%s unsubscribed %d subscription(s)", self.get_id(), count)

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------
    def find_subscription_by_publisher_id(self, publisher_id: str) -> List[Subscription]:
        return find_subscriptions_by_role_and_component_id(self, Role.PUBLISHER_ID, publisher_id)

    def find_subscriptions_by_notification_and_publisher_id(
        self, notification: str, publisher_id: str
    ) -> List[Subscription]:
        return [
            s for s in self.find_subscriptions_by_notification(notification)
            if s.publisher_id == publisher_id
        ]

    # ------------------------------------------------------------
    # Low level
    # ------------------------------------------------------------
    def remove_subscription(self, subscription_id: str) -> None:
        """
        Forget a subscription locally only. The handler is released on the
        shared record, so the publisher still counts its copy but never
        dispatches to it again. Use `unsubscribe_from_subscription_id` to
        remove both.
        """
        self.clear_subscription(subscription_id)

    def wait_until(self, records: Iterable[NotificationRecord]) -> WaitHandle:
        return WaitUntil(self, records).handle
