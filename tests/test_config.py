"""Tests for GCPConfig environment loading."""

import pytest
from pydantic import ValidationError

from mq_adapter.config import GCPConfig, load_gcp_config

FULL_ENV = {
    "GCP_CREDENTIALS_FILE": "/secrets/sa.json",
    "GCP_TOPIC_NAME": "orders",
    "GCP_CREATE_TOPIC": "TRUE",
    "GCP_SUBSCRIPTION_NAME": "orders-worker",
    "GCP_CREATE_SUBSCRIPTION": "TRUE",
    "GCP_PROJECT_ID": "test-project",
}


class TestGCPConfigFromEnv:
    """Test GCPConfig.from_env."""

    def test_empty_environment_yields_zero_defaults(self):
        """Every field falls back to its empty/false default."""
        config = GCPConfig.from_env({})

        assert config.credentials_file == ""
        assert config.topic_name == ""
        assert config.create_topic is False
        assert config.subscription_name == ""
        assert config.create_subscription is False
        assert config.project_id == ""

    def test_reads_all_variables(self):
        config = GCPConfig.from_env(FULL_ENV)

        assert config == GCPConfig(
            credentials_file="/secrets/sa.json",
            topic_name="orders",
            create_topic=True,
            subscription_name="orders-worker",
            create_subscription=True,
            project_id="test-project",
        )

    def test_create_topic_true_only_for_exact_value(self):
        assert GCPConfig.from_env({"GCP_CREATE_TOPIC": "TRUE"}).create_topic is True

    @pytest.mark.parametrize("value", ["true", "True", "1", "yes", "TRUE ", ""])
    def test_create_topic_false_for_other_values(self, value):
        """Only the literal 'TRUE' enables creation."""
        assert GCPConfig.from_env({"GCP_CREATE_TOPIC": value}).create_topic is False

    @pytest.mark.parametrize("value", ["true", "1", "on"])
    def test_create_subscription_false_for_other_values(self, value):
        config = GCPConfig.from_env({"GCP_CREATE_SUBSCRIPTION": value})

        assert config.create_subscription is False

    def test_defaults_to_process_environment(self, monkeypatch):
        for name in FULL_ENV:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("GCP_TOPIC_NAME", "from-os-environ")
        monkeypatch.setenv("GCP_CREATE_SUBSCRIPTION", "TRUE")

        config = load_gcp_config()

        assert config.topic_name == "from-os-environ"
        assert config.create_subscription is True
        assert config.create_topic is False

    def test_config_is_immutable(self):
        config = GCPConfig.from_env(FULL_ENV)

        with pytest.raises(ValidationError):
            config.topic_name = "other"
