# Publisher side: fan a notification out to every subscription of its bucket.
from __future__ import annotations
from typing import Any, List
import logging

from . import config
from .helpers import Role, find_subscriptions_by_role_and_component_id
from .models import ExceptionPolicy, Subscription
from .subscription_manager import SubscriptionManager

LOGGER = logging.getLogger(__name__)


class Publisher(SubscriptionManager):
    def __init__(self, id: str) -> None:
        super().__init__(id)
        self._exception_policy = (
            ExceptionPolicy.STOP if config.STOP_PUBLICATION_ON_EXCEPTION else ExceptionPolicy.CONTINUE
        )

    @property
    def as_publisher(self) -> "Publisher":
        return self

    @property
    def exception_policy(self) -> ExceptionPolicy:
        return self._exception_policy

    def stop_publication_on_exception(self) -> None:
        self._exception_policy = ExceptionPolicy.STOP

    def continue_publication_on_exception(self) -> None:
        self._exception_policy = ExceptionPolicy.CONTINUE

    def publish(self, notification: str, data: Any = None) -> None:
        """
        Call every handler bound to `notification`, highest priority first.

        Handlers are read from a snapshot taken before the first call, so
        (un)subscribing from inside a handler only affects later publications.
        """
        with self._lock:
            bucket = self._notifications_collection.get(notification)
            if not bucket:
                return
            snapshot = [(s, s.handler) for s in bucket if s.handler is not None]

        for subscription, handler in snapshot:
            try:
                handler(data)
            except Exception:
                if self._exception_policy is ExceptionPolicy.STOP:
                    raise
                LOGGER.exception(
                    "Handler of subscription %s failed on %r published by %s",
                    subscription.id, notification, self.get_id(),
                )

    def add_subscriber(self, notification: str, subscription: Subscription) -> None:
        self.add_subscription(notification, subscription)

    def remove_subscriber(self, subscriber_id: str) -> None:
        subscriptions = self.find_subscription_by_subscriber_id(subscriber_id)
        for subscription in subscriptions:
            subscription.unsubscribe()
        LOGGER.debug("%s dropped %d subscription(s) of %s", self.get_id(), len(subscriptions), subscriber_id)

    def find_subscription_by_subscriber_id(self, subscriber_id: str) -> List[Subscription]:
        return find_subscriptions_by_role_and_component_id(self, Role.SUBSCRIBER_ID, subscriber_id)

    def find_subscriptions_by_notification_and_subscriber_id(
        self, notification: str, subscriber_id: str
    ) -> List[Subscription]:
        return [
            s for s in self.find_subscriptions_by_notification(notification)
            if s.subscriber_id == subscriber_id
        ]
