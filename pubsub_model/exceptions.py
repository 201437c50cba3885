class PubSubError(Exception):
    """Base class for every error raised by pubsub_model."""


class InvalidArgument(PubSubError, ValueError):
    pass


class SubscriptionAlreadyExists(PubSubError):
    def __init__(self, subscription_id: str, manager_id: str):
        super().__init__(
            f"Subscription {subscription_id!r} already exists in {manager_id!r}"
        )
        self.subscription_id = subscription_id
        self.manager_id = manager_id


class SubscriptionNotFound(PubSubError, LookupError):
    def __init__(self, subscription_id: str, manager_id: str):
        super().__init__(
            f"Subscription {subscription_id!r} not found in {manager_id!r}"
        )
        self.subscription_id = subscription_id
        self.manager_id = manager_id
