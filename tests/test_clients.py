"""Tests for GCPClientFactory."""

from unittest.mock import patch

import pytest
from google.auth.exceptions import DefaultCredentialsError

from mq_adapter.errors import ClientInitError
from mq_adapter.pubsub.clients import GCPClientFactory, PubSubClientFactory

CLIENTS = "mq_adapter.pubsub.clients"


class TestGCPClientFactory:
    """Test GCPClientFactory."""

    def test_satisfies_factory_protocol(self):
        assert isinstance(GCPClientFactory(), PubSubClientFactory)

    def test_publisher_without_credentials_file_uses_default_credentials(self):
        with patch(f"{CLIENTS}.pubsub_v1.PublisherClient") as publisher_cls, patch(
            f"{CLIENTS}.service_account.Credentials.from_service_account_file"
        ) as from_file:
            client = GCPClientFactory().publisher()

        publisher_cls.assert_called_once_with(credentials=None)
        from_file.assert_not_called()
        assert client is publisher_cls.return_value

    def test_subscriber_loads_credentials_file(self):
        with patch(f"{CLIENTS}.pubsub_v1.SubscriberClient") as subscriber_cls, patch(
            f"{CLIENTS}.service_account.Credentials.from_service_account_file"
        ) as from_file:
            GCPClientFactory().subscriber("/secrets/sa.json")

        from_file.assert_called_once_with("/secrets/sa.json")
        subscriber_cls.assert_called_once_with(credentials=from_file.return_value)

    def test_missing_default_credentials_raise_client_init_error(self):
        error = DefaultCredentialsError("Could not automatically determine credentials")
        with patch(f"{CLIENTS}.pubsub_v1.PublisherClient", side_effect=error):
            with pytest.raises(ClientInitError) as exc_info:
                GCPClientFactory().publisher()

        assert exc_info.value.__cause__ is error

    def test_unreadable_credentials_file_raises_client_init_error(self):
        with patch(
            f"{CLIENTS}.service_account.Credentials.from_service_account_file",
            side_effect=FileNotFoundError("/missing.json"),
        ), patch(f"{CLIENTS}.pubsub_v1.SubscriberClient") as subscriber_cls:
            with pytest.raises(ClientInitError):
                GCPClientFactory().subscriber("/missing.json")

        subscriber_cls.assert_not_called()
