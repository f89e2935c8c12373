"""
Configuration management for the message queue adapter.
"""

import os
from typing import Mapping, Optional
from pydantic import BaseModel, ConfigDict

# Ack deadline used when the adapter creates a subscription
SUBSCRIPTION_ACK_DEADLINE_SECONDS = 60

# Creation flags are only enabled by this exact value
FLAG_ENABLED_VALUE = "TRUE"


class Config:
    """Configuration class for service settings."""

    # Service Configuration
    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "mq_adapter")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Environment Configuration

    # Set by Cloud Run
    K_SERVICE: Optional[str] = os.getenv("K_SERVICE")

    # Pub/Sub emulator (local development)
    PUBSUB_EMULATOR_HOST: Optional[str] = os.getenv("PUBSUB_EMULATOR_HOST")

    # Elasticsearch log sink (optional)
    ELASTICSEARCH_HOST: Optional[str] = os.getenv("ELASTICSEARCH_HOST")
    ELASTICSEARCH_PORT: int = int(os.getenv("ELASTICSEARCH_PORT", "9200"))
    DISABLE_ELASTICSEARCH: bool = (
        os.getenv("DISABLE_ELASTICSEARCH", "false").lower() == "true"
    )


class GCPConfig(BaseModel):
    """Google Cloud Pub/Sub settings for one topic/subscription pair.

    Missing values keep their zero defaults; nothing is validated here, a
    missing topic or project only shows up when an operation talks to
    Pub/Sub.
    """

    model_config = ConfigDict(frozen=True)

    credentials_file: str = ""
    topic_name: str = ""
    create_topic: bool = False
    subscription_name: str = ""
    create_subscription: bool = False
    project_id: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GCPConfig":
        """
        Build the config from environment variables.

        Reads:
            GCP_CREDENTIALS_FILE, GCP_TOPIC_NAME, GCP_CREATE_TOPIC,
            GCP_SUBSCRIPTION_NAME, GCP_CREATE_SUBSCRIPTION, GCP_PROJECT_ID

        Args:
            environ: Mapping to read from. Defaults to os.environ.
        """
        env = os.environ if environ is None else environ
        return cls(
            credentials_file=env.get("GCP_CREDENTIALS_FILE", ""),
            topic_name=env.get("GCP_TOPIC_NAME", ""),
            create_topic=env.get("GCP_CREATE_TOPIC") == FLAG_ENABLED_VALUE,
            subscription_name=env.get("GCP_SUBSCRIPTION_NAME", ""),
            create_subscription=env.get("GCP_CREATE_SUBSCRIPTION")
            == FLAG_ENABLED_VALUE,
            project_id=env.get("GCP_PROJECT_ID", ""),
        )


def load_gcp_config(environ: Optional[Mapping[str, str]] = None) -> GCPConfig:
    """Read GCPConfig from the environment (or the given mapping)."""
    return GCPConfig.from_env(environ)
