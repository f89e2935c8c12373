"""
Topic and subscription resolution, creating them when the config allows it.
"""

from typing import Any

from google.api_core import exceptions

from mq_adapter.config import GCPConfig, SUBSCRIPTION_ACK_DEADLINE_SECONDS
from mq_adapter.errors import (
    CreateError,
    ExistenceCheckError,
    SubscriptionUnavailable,
    TopicUnavailable,
)
from mq_adapter.logging import get_logger, log_error, log_info

logger = get_logger(__name__)


def topic_exists(publisher: Any, topic_path: str) -> bool:
    """Check whether a topic exists."""
    try:
        publisher.get_topic(request={"topic": topic_path})
    except exceptions.NotFound:
        return False
    except exceptions.GoogleAPIError as e:
        log_error(f"Could not check topic {topic_path}: {e}", topic=topic_path)
        raise ExistenceCheckError(f"Could not check topic {topic_path}: {e}") from e
    return True


def subscription_exists(subscriber: Any, subscription_path: str) -> bool:
    """Check whether a subscription exists."""
    try:
        subscriber.get_subscription(request={"subscription": subscription_path})
    except exceptions.NotFound:
        return False
    except exceptions.GoogleAPIError as e:
        log_error(
            f"Could not check subscription {subscription_path}: {e}",
            subscription=subscription_path,
        )
        raise ExistenceCheckError(
            f"Could not check subscription {subscription_path}: {e}"
        ) from e
    return True


def resolve_or_create_topic(publisher: Any, config: GCPConfig) -> str:
    """
    Resolve the configured topic, creating it if it is missing and allowed.

    Args:
        publisher: Publisher client
        config: Adapter config (topic_name, create_topic, project_id)

    Returns:
        Full topic path

    Raises:
        TopicUnavailable: Topic is missing and create_topic is False
        CreateError: Pub/Sub rejected the create call
    """
    topic_path = publisher.topic_path(config.project_id, config.topic_name)

    if topic_exists(publisher, topic_path):
        logger.debug(f"Topic {config.topic_name} already exists")
        return topic_path

    if not config.create_topic:
        raise TopicUnavailable()

    log_info(
        f"Topic don't exist, create one. Topic: {config.topic_name}",
        topic=config.topic_name,
        project_id=config.project_id,
    )
    try:
        publisher.create_topic(request={"name": topic_path})
    except exceptions.AlreadyExists:
        # Created concurrently between the check and the create
        logger.debug(f"Topic {config.topic_name} was created concurrently")
    except exceptions.GoogleAPIError as e:
        log_error(f"Could not create topic {config.topic_name}: {e}", topic=config.topic_name)
        raise CreateError(f"Could not create topic {config.topic_name}: {e}") from e
    return topic_path


def resolve_or_create_subscription(
    subscriber: Any, publisher: Any, config: GCPConfig
) -> str:
    """
    Resolve the configured subscription, creating it (and its topic) if it is
    missing and allowed.

    The subscription is created with a fixed ack deadline of
    SUBSCRIPTION_ACK_DEADLINE_SECONDS.

    Returns:
        Full subscription path

    Raises:
        SubscriptionUnavailable: Subscription is missing and create_subscription is False
        TopicUnavailable: Topic is missing and create_topic is False
        CreateError: Pub/Sub rejected a create call
    """
    subscription_path = subscriber.subscription_path(
        config.project_id, config.subscription_name
    )

    if subscription_exists(subscriber, subscription_path):
        logger.debug(f"Subscription {config.subscription_name} already exists")
        return subscription_path

    if not config.create_subscription:
        raise SubscriptionUnavailable()

    log_info(
        f"Subscription don't exist, create one. Subscription: {config.subscription_name}",
        subscription=config.subscription_name,
        project_id=config.project_id,
    )
    topic_path = resolve_or_create_topic(publisher, config)
    try:
        subscriber.create_subscription(
            request={
                "name": subscription_path,
                "topic": topic_path,
                "ack_deadline_seconds": SUBSCRIPTION_ACK_DEADLINE_SECONDS,
            }
        )
    except exceptions.AlreadyExists:
        logger.debug(f"Subscription {config.subscription_name} was created concurrently")
    except exceptions.GoogleAPIError as e:
        log_error(
            f"Could not create subscription {config.subscription_name}: {e}",
            subscription=config.subscription_name,
        )
        raise CreateError(
            f"Could not create subscription {config.subscription_name}: {e}"
        ) from e
    return subscription_path
