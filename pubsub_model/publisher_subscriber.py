from __future__ import annotations
from typing import Any, Iterable, List, Optional
import warnings

from . import config
from .models import Handler, Identifiable, NotificationRecord, Subscription
from .publisher import Publisher
from .subscriber import Subscriber
from .wait import WaitHandle


class PublisherSubscriber(Identifiable):
    """
    One id, two roles.

    Publication side (publish, add/remove subscriber, exception policy) goes to
    the inner Publisher. Everything else, including the generic manager
    queries, answers for the inner Subscriber.
    """

    def __init__(self, id: str) -> None:
        self._id = id
        self._publisher = Publisher(id)
        self._subscriber = Subscriber(id)

    @property
    def id(self) -> str:
        return self._id

    @property
    def as_publisher(self) -> Publisher:
        return self._publisher

    @property
    def as_subscriber(self) -> Subscriber:
        return self._subscriber

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self._id!r}, "
            f"as_publisher={self.get_nb_subscriptions_as_publisher()}, "
            f"as_subscriber={self.get_nb_subscriptions_as_subscriber()})"
        )

    # -------------------------------
    # Counts
    # -------------------------------
    def get_nb_subscriptions_as_publisher(self) -> int:
        return self._publisher.get_nb_subscriptions()

    def get_nb_subscriptions_as_subscriber(self) -> int:
        return self._subscriber.get_nb_subscriptions()

    def get_nb_subscriptions(self) -> int:
        warnings.warn(
            "get_nb_subscriptions() is ambiguous on a PublisherSubscriber; use "
            "get_nb_subscriptions_as_subscriber() or get_nb_subscriptions_as_publisher()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.get_nb_subscriptions_as_subscriber()

    # -------------------------------
    # Publisher role
    # -------------------------------
    def publish(self, notification: str, data: Any = None) -> None:
        self._publisher.publish(notification, data)

    def add_subscriber(self, notification: str, subscription: Subscription) -> None:
        self._publisher.add_subscriber(notification, subscription)

    def remove_subscriber(self, subscriber_id: str) -> None:
        self._publisher.remove_subscriber(subscriber_id)

    def find_subscription_by_subscriber_id(self, subscriber_id: str) -> List[Subscription]:
        return self._publisher.find_subscription_by_subscriber_id(subscriber_id)

    def find_subscriptions_by_notification_and_subscriber_id(
        self, notification: str, subscriber_id: str
    ) -> List[Subscription]:
        return self._publisher.find_subscriptions_by_notification_and_subscriber_id(notification, subscriber_id)

    def stop_publication_on_exception(self) -> None:
        self._publisher.stop_publication_on_exception()

    def continue_publication_on_exception(self) -> None:
        self._publisher.continue_publication_on_exception()

    # -------------------------------
    # Subscriber role
    # -------------------------------
    def subscribe(
        self,
        publisher,
        notification: str,
        handler: Handler,
        priority: float = config.DEFAULT_PRIORITY,
    ) -> Subscription:
        return self._subscriber.subscribe(publisher, notification, handler, priority)

    def unsubscribe_from_subscription_id(self, subscription_id: str) -> None:
        self._subscriber.unsubscribe_from_subscription_id(subscription_id)

    def unsubscribe_from_publisher_id(self, publisher_id: str) -> None:
        self._subscriber.unsubscribe_from_publisher_id(publisher_id)

    def unsubscribe_from_notification(self, notification: str) -> None:
        self._subscriber.unsubscribe_from_notification(notification)

    def find_subscription_by_publisher_id(self, publisher_id: str) -> List[Subscription]:
        return self._subscriber.find_subscription_by_publisher_id(publisher_id)

    def find_subscriptions_by_notification_and_publisher_id(
        self, notification: str, publisher_id: str
    ) -> List[Subscription]:
        return self._subscriber.find_subscriptions_by_notification_and_publisher_id(notification, publisher_id)

    def add_subscription(self, notification: str, subscription: Subscription) -> None:
        self._subscriber.add_subscription(notification, subscription)

    def remove_subscription(self, subscription_id: str) -> None:
        self._subscriber.remove_subscription(subscription_id)

    def wait_until(self, records: Iterable[NotificationRecord]) -> WaitHandle:
        return self._subscriber.wait_until(records)

    # -------------------------------
    # Manager queries (subscriber side)
    # -------------------------------
    def has_subscription(self, subscription_id: str) -> bool:
        return self._subscriber.has_subscription(subscription_id)

    def get_subscriptions(self) -> List[Subscription]:
        return self._subscriber.get_subscriptions()

    def find_subscription_by_id(self, subscription_id: str) -> Optional[Subscription]:
        return self._subscriber.find_subscription_by_id(subscription_id)

    def find_subscriptions_by_notification(self, notification: str) -> List[Subscription]:
        return self._subscriber.find_subscriptions_by_notification(notification)

    def clear_subscription(self, subscription_id: str) -> None:
        self._subscriber.clear_subscription(subscription_id)

    def destroy(self) -> None:
        self._subscriber.destroy()
        self._publisher.destroy()
