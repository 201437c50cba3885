from enum import Enum
from typing import List

from .models import Subscription


class Role(Enum):
    SUBSCRIBER_ID = "subscriber_id"
    PUBLISHER_ID = "publisher_id"


def find_subscriptions_by_role_and_component_id(manager, role: Role, component_id: str) -> List[Subscription]:
    """All subscriptions of `manager` whose `role` side is `component_id`."""
    return [
        subscription
        for subscription in manager.get_subscriptions()
        if getattr(subscription, role.value) == component_id
    ]
