"""
Errors raised by the message queue adapter.

Service errors are chained as ``__cause__`` so callers still see the
original google.api_core exception.
"""

ERR_GCP_TOPIC_DONT_EXIST = (
    "GCP PubSub Topic not existing and not allowed to create one."
)
ERR_GCP_SUBSCRIPTION_DONT_EXIST = (
    "GCP PubSub Subscription not existing and not allowed to create one."
)


class QueueError(Exception):
    """Base class for all adapter errors."""


class ClientInitError(QueueError):
    """A Pub/Sub client could not be created."""


class ExistenceCheckError(QueueError):
    """Checking whether a topic or subscription exists failed."""


class TopicUnavailable(QueueError):
    """Topic is missing and the config does not allow creating it."""

    def __init__(self, message: str = ERR_GCP_TOPIC_DONT_EXIST):
        super().__init__(message)


class SubscriptionUnavailable(QueueError):
    """Subscription is missing and the config does not allow creating it."""

    def __init__(self, message: str = ERR_GCP_SUBSCRIPTION_DONT_EXIST):
        super().__init__(message)


class CreateError(QueueError):
    """Pub/Sub rejected creating a topic or subscription."""


class PublishError(QueueError):
    """Publishing a message failed."""


class ReceiveError(QueueError):
    """The streaming pull terminated with an error."""
