"""
Unit tests for the Secrets Manager store, backed by moto.
"""

import json
from unittest.mock import Mock

import boto3
import pytest
from botocore.exceptions import ConnectTimeoutError
from moto import mock_aws

from service.security.secrets_manager import (
    SecretNotFoundError,
    SecretRetrievalError,
    SecretsStore,
    get_secrets_store,
)

REGION = "eu-central-1"


@pytest.fixture
def secretsmanager():
    with mock_aws():
        yield boto3.client("secretsmanager", region_name=REGION)


@pytest.fixture
def store(secretsmanager):
    return SecretsStore(region_name=REGION, client=secretsmanager)


class TestSecretsStore:
    """Test cases for cached secret retrieval."""

    def test_json_secret(self, secretsmanager, store):
        secretsmanager.create_secret(Name="catalog/mongo", SecretString=json.dumps({"MONGODB_URI": "mongodb://db"}))

        assert store.get_secret_json("catalog/mongo") == {"MONGODB_URI": "mongodb://db"}
        assert store.get_secret_field("catalog/mongo", "MONGODB_URI") == "mongodb://db"

    def test_secret_is_cached(self, secretsmanager):
        secretsmanager.create_secret(Name="catalog/mongo", SecretString=json.dumps({"MONGODB_URI": "mongodb://db"}))
        client = Mock(wraps=secretsmanager)
        store = SecretsStore(region_name=REGION, client=client)

        store.get_secret_json("catalog/mongo")
        store.get_secret_json("catalog/mongo")

        assert client.get_secret_value.call_count == 1

    def test_invalidate_forces_refetch(self, secretsmanager, store):
        secretsmanager.create_secret(Name="users/db", SecretString=json.dumps({"DATABASE_URL": "postgresql://old"}))
        store.get_secret_json("users/db")
        secretsmanager.put_secret_value(SecretId="users/db", SecretString=json.dumps({"DATABASE_URL": "postgresql://new"}))

        store.invalidate("users/db")

        assert store.get_secret_field("users/db", "DATABASE_URL") == "postgresql://new"

    def test_missing_secret(self, store):
        with pytest.raises(SecretNotFoundError):
            store.get_secret_json("does/not/exist")

    def test_failures_are_not_cached(self, secretsmanager, store):
        with pytest.raises(SecretNotFoundError):
            store.get_secret_json("late/secret")

        secretsmanager.create_secret(Name="late/secret", SecretString=json.dumps({"k": "v"}))

        assert store.get_secret_json("late/secret") == {"k": "v"}

    def test_non_json_secret(self, secretsmanager, store):
        secretsmanager.create_secret(Name="plain", SecretString="not-json")

        with pytest.raises(SecretRetrievalError):
            store.get_secret_json("plain")

    def test_json_array_secret(self, secretsmanager, store):
        secretsmanager.create_secret(Name="array", SecretString="[1, 2]")

        with pytest.raises(SecretRetrievalError):
            store.get_secret_json("array")

    def test_missing_field(self, secretsmanager, store):
        secretsmanager.create_secret(Name="catalog/mongo", SecretString=json.dumps({"OTHER": "x"}))

        with pytest.raises(SecretRetrievalError):
            store.get_secret_field("catalog/mongo", "MONGODB_URI")

    def test_other_client_errors(self, client_error):
        client = Mock()
        client.get_secret_value.side_effect = client_error("AccessDeniedException")

        with pytest.raises(SecretRetrievalError) as exc_info:
            SecretsStore(region_name=REGION, client=client).get_secret_json("catalog/mongo")

        assert "AccessDeniedException" in exc_info.value.message

    def test_timeouts(self):
        client = Mock()
        client.get_secret_value.side_effect = ConnectTimeoutError(endpoint_url="https://secretsmanager")

        with pytest.raises(SecretRetrievalError):
            SecretsStore(region_name=REGION, client=client).get_secret_json("catalog/mongo")

    def test_errors_are_not_operational(self, store):
        with pytest.raises(SecretNotFoundError) as exc_info:
            store.get_secret_json("missing")

        assert exc_info.value.is_operational is False
        assert exc_info.value.status_code == 500


class TestSecretsStoreFactory:
    def test_single_attempt_client_configuration(self):
        store = get_secrets_store(region_name=REGION, timeout_seconds=3)

        config = store.client.meta.config
        assert config.connect_timeout == 1.2
        assert config.read_timeout == 1.8
        assert config.connect_timeout + config.read_timeout == pytest.approx(3)
        assert config.retries["total_max_attempts"] == 1
        assert get_secrets_store(region_name=REGION) is store
