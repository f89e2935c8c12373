"""
Thin adapter for publishing to and subscribing from Google Cloud Pub/Sub.
"""

from mq_adapter.config import GCPConfig, SUBSCRIPTION_ACK_DEADLINE_SECONDS, load_gcp_config
from mq_adapter.errors import (
    ClientInitError,
    CreateError,
    ExistenceCheckError,
    PublishError,
    QueueError,
    ReceiveError,
    SubscriptionUnavailable,
    TopicUnavailable,
)
from mq_adapter.pubsub import GCPQueue, ReceiveContext, get_gcp_queue, new_gcp_queue

__all__ = [
    "GCPConfig",
    "SUBSCRIPTION_ACK_DEADLINE_SECONDS",
    "load_gcp_config",
    "ClientInitError",
    "CreateError",
    "ExistenceCheckError",
    "PublishError",
    "QueueError",
    "ReceiveError",
    "SubscriptionUnavailable",
    "TopicUnavailable",
    "GCPQueue",
    "ReceiveContext",
    "get_gcp_queue",
    "new_gcp_queue",
]
