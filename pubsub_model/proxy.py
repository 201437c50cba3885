# Repeat notifications of other publishers under the proxy's own id.
from __future__ import annotations
from typing import Any, Callable, Optional
import logging

from .publisher_subscriber import PublisherSubscriber

LOGGER = logging.getLogger(__name__)


class PublisherProxy(PublisherSubscriber):
    def add_proxy(
        self,
        publisher,
        notification: str,
        hook: Optional[Callable[[Any], Any]] = None,
    ):
        """Republish `notification` of `publisher`, passing payloads through `hook` first."""
        def relay(payload: Any) -> None:
            self.publish(notification, hook(payload) if hook is not None else payload)

        self.subscribe(publisher, notification, relay)
        LOGGER.debug("%s now proxies %r from %s", self.get_id(), notification, publisher.get_id())
        return self

    def remove_proxy(self, publisher, notification: str):
        for subscription in self.find_subscriptions_by_notification_and_publisher_id(
            notification, publisher.get_id()
        ):
            subscription.unsubscribe()
        return self
