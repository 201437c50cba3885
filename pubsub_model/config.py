# Global knobs (subscription defaults + id layout)
import uuid

# Subscriptions run highest priority first
DEFAULT_PRIORITY = 0

# Publishers start in CONTINUE mode: one failing handler doesn't starve the others
STOP_PUBLICATION_ON_EXCEPTION = False

# ---------------------------------------------------------------------
# Subscription ids
#   <subscriber_id>_<publisher_id>_<notification>_<uuid4 hex>
# The uuid suffix keeps ids unique even when the same subscriber binds
# the same notification of the same publisher several times.
# ---------------------------------------------------------------------
SUBSCRIPTION_ID_SEPARATOR = "_"


def new_subscription_id(subscriber_id: str, publisher_id: str, notification: str) -> str:
    return SUBSCRIPTION_ID_SEPARATOR.join(
        (subscriber_id, publisher_id, notification, uuid.uuid4().hex)
    )
