"""
Remote secret store capability consumed by the cache.

The cache only ever calls two operations on the store. Anything that
implements them can back a cache; the boto3 adapter below talks to AWS
Secrets Manager.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import SecretStoreError
from .logging import get_logger
from .models import DescribeSecretResult, GetSecretValueResult

USER_AGENT = "AwsSecretCache/1.0.0"


class SecretsStore(ABC):
    """Remote secret store. Implementations must be thread safe."""

    @abstractmethod
    def describe_secret(self, secret_id: str) -> DescribeSecretResult:
        """Fetch secret metadata (version id to stages mapping)."""

    @abstractmethod
    def get_secret_value(self, secret_id: str, version_id: str) -> GetSecretValueResult:
        """Fetch the payload of one secret version."""


class Boto3SecretsStore(SecretsStore):
    """Secrets store backed by a boto3 ``secretsmanager`` client."""

    def __init__(self, client: Any):
        self.client = client
        self.logger = get_logger("secret_cache.store")

    @classmethod
    def create(cls, region_name: Optional[str] = None, **kwargs) -> "Boto3SecretsStore":
        """
        Build a store with a new boto3 client.

        Args:
            region_name: AWS region, defaults to the boto3 resolution chain
            **kwargs: Extra arguments for ``boto3.client``

        Returns:
            Boto3SecretsStore instance
        """
        config = Config(user_agent_extra=USER_AGENT)
        if "config" in kwargs:
            config = kwargs.pop("config").merge(config)
        client = boto3.client("secretsmanager", region_name=region_name, config=config, **kwargs)
        return cls(client)

    def describe_secret(self, secret_id: str) -> DescribeSecretResult:
        response = self._call("describe_secret", secret_id, SecretId=secret_id)
        return DescribeSecretResult(
            name=response.get("Name"),
            arn=response.get("ARN"),
            version_ids_to_stages=response.get("VersionIdsToStages"),
        )

    def get_secret_value(self, secret_id: str, version_id: str) -> GetSecretValueResult:
        response = self._call("get_secret_value", secret_id, SecretId=secret_id, VersionId=version_id)
        return GetSecretValueResult(
            name=response.get("Name"),
            arn=response.get("ARN"),
            version_id=response.get("VersionId", version_id),
            secret_string=response.get("SecretString"),
            secret_binary=response.get("SecretBinary"),
            version_stages=response.get("VersionStages"),
            created_date=response.get("CreatedDate"),
        )

    def _call(self, operation: str, secret_id: str, **params) -> Dict[str, Any]:
        """Invoke a client operation, mapping botocore failures."""
        try:
            return getattr(self.client, operation)(**params)
        except ClientError as e:
            error = e.response.get("Error", {})
            self.logger.warning(
                "Secret store request failed",
                operation=operation,
                secret_id=secret_id,
                error_code=error.get("Code"),
            )
            raise SecretStoreError(
                operation,
                error.get("Message") or str(e),
                details={"secret_id": secret_id, "error_code": error.get("Code")},
            ) from e
        except BotoCoreError as e:
            self.logger.warning(
                "Secret store request failed",
                operation=operation,
                secret_id=secret_id,
                error=str(e),
            )
            raise SecretStoreError(operation, str(e), details={"secret_id": secret_id}) from e
