"""Shared fixtures: fake Pub/Sub clients and a client factory returning them."""

from unittest.mock import Mock

import pytest

from mq_adapter.config import GCPConfig


@pytest.fixture
def gcp_config():
    return GCPConfig(
        credentials_file="/secrets/service-account.json",
        topic_name="orders",
        create_topic=False,
        subscription_name="orders-worker",
        create_subscription=False,
        project_id="test-project",
    )


@pytest.fixture
def fake_publisher():
    """Publisher client whose topic exists and whose publish returns 'msg-1'."""
    publisher = Mock()
    publisher.topic_path.side_effect = lambda project, topic: f"projects/{project}/topics/{topic}"
    publisher.publish.return_value = Mock(result=Mock(return_value="msg-1"))
    return publisher


@pytest.fixture
def fake_subscriber():
    """Subscriber client whose subscription exists."""
    subscriber = Mock()
    subscriber.subscription_path.side_effect = (
        lambda project, sub: f"projects/{project}/subscriptions/{sub}"
    )
    return subscriber


@pytest.fixture
def client_factory(fake_publisher, fake_subscriber):
    factory = Mock()
    factory.publisher.return_value = fake_publisher
    factory.subscriber.return_value = fake_subscriber
    return factory
