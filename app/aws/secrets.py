"""
AWS Secrets Manager lookup for database credentials.
"""
import json
import logging
from typing import Any, Dict

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class SecretsReader:
    """Reads JSON secrets from Secrets Manager."""

    def __init__(self, secretsmanager_client):
        self.client = secretsmanager_client

    def read_json(self, secret_name: str) -> Dict[str, Any]:
        """
        Fetch a secret and parse its SecretString as JSON.

        Raises:
            ClientError: the secret is missing or access is denied
        """
        try:
            response = self.client.get_secret_value(SecretId=secret_name)
        except ClientError as e:
            logger.error(f"Could not read secret {secret_name}: {e.response['Error']['Code']}")
            raise
        logger.info(f"Secret {secret_name} retrieved.")
        return json.loads(response["SecretString"])


def get_secret(secret_name: str, region_name: str = "eu-central-1") -> Dict[str, Any]:
    """Secret name/path -> dict of its key-value pairs."""
    session = boto3.session.Session()
    client = session.client(service_name="secretsmanager", region_name=region_name)
    return SecretsReader(client).read_json(secret_name)
