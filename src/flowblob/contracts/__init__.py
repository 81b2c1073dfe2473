"""Shared contracts: metadata, results and error types.

Leaf module - imports nothing else from flowblob.
"""

from flowblob.contracts.errors import (
    ActivityError,
    BlobListError,
    BlobUploadError,
    ContainerCreateError,
    CredentialError,
    ExecutionError,
    LocalFileError,
)
from flowblob.contracts.metadata import ActivityMetadata, FieldSpec
from flowblob.contracts.results import ActivityResult, BlobDescriptor, EvalResult

__all__ = [
    "ActivityError",
    "ActivityMetadata",
    "ActivityResult",
    "BlobDescriptor",
    "BlobListError",
    "BlobUploadError",
    "ContainerCreateError",
    "CredentialError",
    "EvalResult",
    "ExecutionError",
    "FieldSpec",
    "LocalFileError",
]
