"""
Pub/Sub client construction.

Supports both Pub/Sub (production) and the Pub/Sub emulator (local development).
The client library switches to the emulator on its own when
PUBSUB_EMULATOR_HOST is set.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from google.cloud import pubsub_v1
from google.oauth2 import service_account

from mq_adapter.config import Config
from mq_adapter.errors import ClientInitError
from mq_adapter.logging import log_error, log_info


@runtime_checkable
class PubSubClientFactory(Protocol):
    """Creates the Pub/Sub clients an operation needs."""

    def publisher(self, credentials_file: str = "") -> Any:
        """Return a publisher client (topic admin + publish)."""
        ...

    def subscriber(self, credentials_file: str = "") -> Any:
        """Return a subscriber client (subscription admin + streaming pull)."""
        ...


class GCPClientFactory:
    """Builds google-cloud-pubsub clients, one per call."""

    def _load_credentials(self, credentials_file: str) -> Optional[Any]:
        """Load service account credentials, or None for Application Default Credentials."""
        if not credentials_file:
            return None
        return service_account.Credentials.from_service_account_file(credentials_file)

    def _mode(self) -> str:
        if Config.PUBSUB_EMULATOR_HOST:
            return f"emulator mode: {Config.PUBSUB_EMULATOR_HOST}"
        return "production mode"

    def publisher(self, credentials_file: str = "") -> pubsub_v1.PublisherClient:
        try:
            credentials = self._load_credentials(credentials_file)
            client = pubsub_v1.PublisherClient(credentials=credentials)
        except Exception as e:
            log_error(f"Failed to create Pub/Sub publisher client: {e}")
            raise ClientInitError(f"Failed to create Pub/Sub publisher client: {e}") from e
        log_info(f"Created Pub/Sub publisher client ({self._mode()})")
        return client

    def subscriber(self, credentials_file: str = "") -> pubsub_v1.SubscriberClient:
        try:
            credentials = self._load_credentials(credentials_file)
            client = pubsub_v1.SubscriberClient(credentials=credentials)
        except Exception as e:
            log_error(f"Failed to create Pub/Sub subscriber client: {e}")
            raise ClientInitError(f"Failed to create Pub/Sub subscriber client: {e}") from e
        log_info(f"Created Pub/Sub subscriber client ({self._mode()})")
        return client
