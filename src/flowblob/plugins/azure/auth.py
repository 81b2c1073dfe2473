# src/flowblob/plugins/azure/auth.py
"""Shared-key authentication for the Azure Blob activity.

The credential is built from the storage account name and access key on
every execution and is never cached. An access key that cannot be used to
sign requests (empty, or not base64) is a fatal CredentialError raised
before any network call.

IMPORTANT: The access key is a secret. Pass it via environment variables
(${AZURE_STORAGE_ACCESS_KEY}) rather than committing it to settings files.
"""

import base64
import binascii
from typing import Any
from urllib.parse import urlparse

from azure.core.credentials import AzureNamedKeyCredential
from azure.storage.blob import ContainerClient
from pydantic import BaseModel, ConfigDict, Field, field_validator

from flowblob.contracts.errors import CredentialError

BLOB_ENDPOINT_TEMPLATE = "https://{account}.blob.core.windows.net"


def check_account_url(v: str | None) -> str | None:
    """Require an http(s) URL with a host; blank means the default endpoint."""
    if v is None or not v.strip():
        return None
    parsed = urlparse(v.strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValueError(f"account_url must be an http(s) URL with a host, got '{v}'")
    return v.strip()


class SharedKeyAuthConfig(BaseModel):
    """Account name + access key, plus an optional endpoint override.

    Example configurations:

        # Public Azure cloud (endpoint derived from the account name)
        account_name: mystorageaccount
        account_key: "${AZURE_STORAGE_ACCESS_KEY}"

        # Azurite emulator
        account_name: devstoreaccount1
        account_key: "${AZURITE_ACCOUNT_KEY}"
        account_url: "http://127.0.0.1:10000/devstoreaccount1"
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    account_name: str
    account_key: str = Field(repr=False)
    account_url: str | None = None

    @field_validator("account_name")
    @classmethod
    def validate_account_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("account_name cannot be empty")
        return v.strip()

    @field_validator("account_url")
    @classmethod
    def validate_account_url(cls, v: str | None) -> str | None:
        return check_account_url(v)

    @property
    def resolved_account_url(self) -> str:
        """Blob service endpoint for this account, without trailing slash."""
        if self.account_url is not None:
            return self.account_url.rstrip("/")
        return BLOB_ENDPOINT_TEMPLATE.format(account=self.account_name)

    def container_url(self, container_name: str) -> str:
        """Endpoint URL of a container: {account_url}/{container}."""
        return f"{self.resolved_account_url}/{container_name}"

    def create_credential(self) -> AzureNamedKeyCredential:
        """Build a fresh shared-key credential.

        Raises:
            CredentialError: If the access key is empty or not valid base64.
        """
        key = self.account_key.strip()
        if not key:
            raise CredentialError(
                f"Invalid credentials for storage account '{self.account_name}': access key is empty",
                operation="create_credential",
            )
        try:
            base64.b64decode(key, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CredentialError(
                f"Invalid credentials for storage account '{self.account_name}': access key is not valid base64",
                operation="create_credential",
            ) from e

        return AzureNamedKeyCredential(self.account_name, key)

    def create_container_client(self, container_name: str, **client_kwargs: Any) -> ContainerClient:
        """Create a ContainerClient authenticated with a fresh credential.

        Args:
            container_name: Container to address.
            **client_kwargs: Transfer options passed to the SDK client
                (e.g. max_block_size).

        Raises:
            CredentialError: If the credential cannot be constructed.
        """
        credential = self.create_credential()
        return ContainerClient(
            account_url=self.resolved_account_url,
            container_name=container_name,
            credential=credential,
            **client_kwargs,
        )
