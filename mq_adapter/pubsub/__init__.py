"""
Google Cloud Pub/Sub queue: publishing, streaming receive and resource provisioning.
"""

from mq_adapter.pubsub.clients import GCPClientFactory, PubSubClientFactory
from mq_adapter.pubsub.context import ReceiveContext
from mq_adapter.pubsub.gcp_queue import GCPQueue, get_gcp_queue, new_gcp_queue
from mq_adapter.pubsub.resources import (
    resolve_or_create_subscription,
    resolve_or_create_topic,
)

__all__ = [
    "GCPClientFactory",
    "PubSubClientFactory",
    "ReceiveContext",
    "GCPQueue",
    "get_gcp_queue",
    "new_gcp_queue",
    "resolve_or_create_subscription",
    "resolve_or_create_topic",
]
