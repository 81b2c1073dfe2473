# src/flowblob/plugins/azure/operations.py
"""Host-independent Azure Blob operations.

This is the library behind the azure_blob activity:

    config = configure(settings)                  # validate once
    result = execute(config, BlobActivityInput(file="abc.txt", data="hello"))

No workflow-runtime types appear here; the runtime shim in blob_activity.py
only translates a host context into these calls.

Three-tier trust model:
    - Azure Blob SDK calls = EXTERNAL SYSTEM -> wrap with try/except
    - Local filesystem = EXTERNAL SYSTEM -> wrap with try/except
    - Our own state = OUR CODE -> let it crash
"""

from enum import StrEnum
from typing import Any, Self

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.blob import BlobType, ContainerClient, StorageErrorCode
from pydantic import Field, field_validator, model_validator

from flowblob.contracts import (
    ActivityResult,
    BlobDescriptor,
    BlobListError,
    BlobUploadError,
    ContainerCreateError,
    LocalFileError,
)
from flowblob.core.logging import get_logger
from flowblob.plugins.azure.auth import SharedKeyAuthConfig, check_account_url
from flowblob.plugins.config_base import PluginConfig, PluginConfigError

logger = get_logger(__name__)

# Block blob transfer tuning; chunking and parallel block upload happen
# inside the SDK.
UPLOAD_BLOCK_SIZE = 4 * 1024 * 1024
UPLOAD_MAX_CONCURRENCY = 16


class Method(StrEnum):
    """Operations the activity can perform."""

    UPLOAD = "upload"
    LIST = "list"


class BlobActivityConfig(PluginConfig):
    """Validated settings for the azure_blob activity.

    Example configuration:

        azure_storage_account: mystorageaccount
        azure_storage_access_key: "${AZURE_STORAGE_ACCESS_KEY}"
        method: upload
        container_name: samples

    Optional:
        account_url: endpoint override (Azurite, sovereign clouds)
        page_size: blobs requested per listing page
    """

    azure_storage_account: str = Field(..., description="Azure Storage account name")
    azure_storage_access_key: str = Field(..., description="Azure Storage account access key", repr=False)
    method: Method = Field(..., description="Operation to perform: upload or list")
    container_name: str = Field(..., description="Azure Blob container name")
    account_url: str | None = Field(
        default=None,
        description="Blob service endpoint (default: https://{account}.blob.core.windows.net)",
    )
    page_size: int | None = Field(
        default=None,
        gt=0,
        description="Blobs requested per listing page (default: service default)",
    )

    @field_validator("azure_storage_account", "container_name")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only names."""
        if not v or not v.strip():
            raise ValueError("cannot be empty")
        return v.strip()

    @field_validator("account_url")
    @classmethod
    def validate_account_url(cls, v: str | None) -> str | None:
        """Reject endpoints the SDK cannot build a client for."""
        return check_account_url(v)

    @model_validator(mode="after")
    def validate_auth_config(self) -> Self:
        """Validate the account fields via SharedKeyAuthConfig."""
        self.get_auth_config()
        return self

    def get_auth_config(self) -> SharedKeyAuthConfig:
        return SharedKeyAuthConfig(
            account_name=self.azure_storage_account,
            account_key=self.azure_storage_access_key,
            account_url=self.account_url,
        )

    @property
    def container_url(self) -> str:
        """https://{account}.blob.core.windows.net/{container}"""
        return self.get_auth_config().container_url(self.container_name)


class BlobActivityInput(PluginConfig):
    """Per-invocation inputs.

    Only upload uses them: data is written to the local path `file`, then the
    file is uploaded as a blob named after that same path.
    """

    file: str | None = None
    data: str | None = None

    def require_upload_payload(self) -> tuple[str, str]:
        """Return (file, data) for upload.

        Raises:
            PluginConfigError: If either input is missing or file is empty.
        """
        missing = [name for name, value in (("file", self.file), ("data", self.data)) if value is None]
        if missing:
            raise PluginConfigError(
                f"Upload requires input(s): {', '.join(missing)}",
                fields=tuple(missing),
            )
        # Checked above; narrow for type checkers
        file_path: str = self.file  # type: ignore[assignment]
        data: str = self.data  # type: ignore[assignment]
        if not file_path.strip():
            raise PluginConfigError("Upload input 'file' cannot be empty", fields=("file",))
        return file_path, data


def configure(settings: dict[str, Any]) -> BlobActivityConfig:
    """Validate raw settings into an immutable BlobActivityConfig.

    Raises:
        PluginConfigError: Naming every invalid or missing setting.
    """
    return BlobActivityConfig.from_dict(settings)


def open_container_client(config: BlobActivityConfig) -> ContainerClient:
    """Create a container client with a fresh shared-key credential.

    Raises:
        CredentialError: If the access key cannot be used to sign requests.
    """
    return config.get_auth_config().create_container_client(
        config.container_name,
        max_block_size=UPLOAD_BLOCK_SIZE,
    )


def execute(config: BlobActivityConfig, inputs: BlobActivityInput | None = None) -> ActivityResult:
    """Run the configured operation.

    Args:
        config: Validated settings.
        inputs: Invocation inputs (required for upload, ignored for list).

    Returns:
        ActivityResult; list results carry {"result": {name: BlobDescriptor}}.

    Raises:
        PluginConfigError: If upload inputs are missing.
        ActivityError: On credential, provider or local I/O failure.
    """
    inputs = inputs if inputs is not None else BlobActivityInput()
    logger.info("Executing method", method=str(config.method), container_url=config.container_url)

    if config.method is Method.UPLOAD:
        file_path, data = inputs.require_upload_payload()
        with open_container_client(config) as container_client:
            upload_file(container_client, file_path, data)
        return ActivityResult.empty()
    elif config.method is Method.LIST:
        with open_container_client(config) as container_client:
            blobs = list_blobs(container_client, page_size=config.page_size)
        return ActivityResult.listing(blobs)
    else:
        # Unreachable: Method is a closed enum validated by Pydantic
        raise AssertionError(f"Unsupported method: {config.method}")


def ensure_container(container_client: ContainerClient) -> bool:
    """Create the container with no public access.

    Returns:
        True if the container was created, False if it already existed.

    Raises:
        ContainerCreateError: On any failure other than ContainerAlreadyExists.
    """
    container_name = container_client.container_name
    logger.info("Creating container", container=container_name)
    try:
        container_client.create_container(public_access=None)
    except ResourceExistsError as e:
        # error_code is attached by the storage SDK's error deserialisation
        if getattr(e, "error_code", None) != StorageErrorCode.CONTAINER_ALREADY_EXISTS:
            # e.g. ContainerBeingDeleted is also a 409 but is not recoverable here
            raise ContainerCreateError(
                f"Failed to create container '{container_name}': {e}",
                operation="create_container",
            ) from e
        logger.info("Container exists", container=container_name)
        return False
    except AzureError as e:
        raise ContainerCreateError(
            f"Failed to create container '{container_name}': {e}",
            operation="create_container",
        ) from e
    return True


def write_local_file(file_path: str, data: str) -> None:
    """Write data to file_path, replacing any existing content.

    Raises:
        LocalFileError: If the file cannot be written.
    """
    logger.debug("Writing local file", path=file_path, size=len(data))
    try:
        with open(file_path, "w", encoding="utf-8") as fh:
            fh.write(data)
    except (OSError, ValueError) as e:  # ValueError: embedded NUL in the path
        raise LocalFileError(f"Failed to write local file '{file_path}': {e}", operation="write_file") from e


def upload_file(container_client: ContainerClient, file_path: str, data: str) -> None:
    """Create the container if needed, write data to file_path and upload it.

    The blob is named after file_path and uploaded as a block blob in
    UPLOAD_BLOCK_SIZE blocks with UPLOAD_MAX_CONCURRENCY parallel transfers.

    Raises:
        ContainerCreateError: If the container cannot be created.
        LocalFileError: If the file cannot be written or reopened.
        BlobUploadError: If the upload fails.
    """
    ensure_container(container_client)
    write_local_file(file_path, data)

    try:
        fh = open(file_path, "rb")
    except (OSError, ValueError) as e:
        raise LocalFileError(f"Failed to open local file '{file_path}': {e}", operation="open_file") from e

    with fh:
        logger.info("Uploading file", blob=file_path, container=container_client.container_name)
        try:
            container_client.upload_blob(
                name=file_path,
                data=fh,
                blob_type=BlobType.BLOCKBLOB,
                overwrite=True,
                max_concurrency=UPLOAD_MAX_CONCURRENCY,
            )
        except AzureError as e:
            raise BlobUploadError(
                f"Failed to upload blob '{file_path}' to container '{container_client.container_name}': {e}",
                operation="upload_blob",
            ) from e


def list_blobs(container_client: ContainerClient, *, page_size: int | None = None) -> dict[str, BlobDescriptor]:
    """List every blob in the container, following continuation markers.

    Returns:
        Mapping of blob name to descriptor, in listing order.

    Raises:
        BlobListError: If any page fails. Earlier pages are discarded.
    """
    container_name = container_client.container_name
    logger.info("Listing blobs", container=container_name)

    list_kwargs: dict[str, Any] = {}
    if page_size is not None:
        list_kwargs["results_per_page"] = page_size

    blobs: dict[str, BlobDescriptor] = {}
    pages_fetched = 0
    try:
        for page in container_client.list_blobs(**list_kwargs).by_page():
            pages_fetched += 1
            for properties in page:
                blobs[properties.name] = BlobDescriptor.from_properties(properties)
                logger.debug("Blob listed", blob=properties.name)
    except AzureError as e:
        raise BlobListError(
            f"Failed to list blobs in container '{container_name}' (page {pages_fetched + 1}): {e}",
            operation="list_blobs",
        ) from e

    logger.info("Listed blobs", container=container_name, count=len(blobs), pages=pages_fetched)
    return blobs
