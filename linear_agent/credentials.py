"""Access-token providers for the Linear API."""

import json
import logging
from abc import ABC, abstractmethod

import boto3
from botocore.exceptions import ClientError

from .config import LinearConfig
from .errors import MissingCredentialError

logger = logging.getLogger(__name__)


class CredentialProvider(ABC):
    """Supplies a currently valid Linear access token."""
    
    @abstractmethod
    def get_access_token(self) -> str:
        """
        Return the access token.
        
        Raises:
            MissingCredentialError: If no token is available.
        """
        pass


class EnvCredentialProvider(CredentialProvider):
    """Token taken from ``LINEAR_ACCESS_TOKEN``."""
    
    def __init__(self, config: LinearConfig):
        self.config = config
    
    def get_access_token(self) -> str:
        if not self.config.access_token:
            raise MissingCredentialError()
        return self.config.access_token


class SecretsManagerCredentialProvider(CredentialProvider):
    """Token stored in AWS Secrets Manager by the OAuth callback."""
    
    def __init__(self, secret_arn: str, client=None):
        self.secret_arn = secret_arn
        self.client = client or boto3.client('secretsmanager')
    
    def get_access_token(self) -> str:
        try:
            response = self.client.get_secret_value(SecretId=self.secret_arn)
        except ClientError as e:
            logger.error(f"Error retrieving secret: {e}")
            if e.response.get('Error', {}).get('Code') == 'ResourceNotFoundException':
                raise MissingCredentialError() from e
            raise
        
        secret = (response.get('SecretString') or '').strip()
        # Either the raw token or a JSON document holding it
        if secret.startswith('{'):
            secret = json.loads(secret).get('access_token') or ''
        if not secret:
            raise MissingCredentialError()
        return secret


def create_credential_provider(config: LinearConfig) -> CredentialProvider:
    """Prefer Secrets Manager when a secret ARN is configured."""
    if config.token_secret_arn:
        return SecretsManagerCredentialProvider(config.token_secret_arn)
    return EnvCredentialProvider(config)
