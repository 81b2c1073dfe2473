"""Error contracts for activity execution.

Runtime failures raised by the blob operations. Configuration failures live in
flowblob.plugins.config_base (PluginConfigError and friends) because they are
raised while validating settings, before any operation runs.

Three-tier trust model:
    - Azure SDK calls = EXTERNAL SYSTEM -> wrap into ActivityError subclasses
    - Local filesystem = EXTERNAL SYSTEM -> wrap into LocalFileError
    - Our own code = let it crash (bugs are not ActivityErrors)
"""

from typing import NotRequired, TypedDict


class ExecutionError(TypedDict):
    """Fields attached to the log event of a failed evaluation."""

    error: str  # String representation of the exception
    error_type: str  # Exception class name (e.g., "BlobListError")
    operation: NotRequired[str]  # Operation that failed, when known


class ActivityError(Exception):
    """Base class for fatal errors raised while executing an activity.

    Attributes:
        operation: Name of the failing step (e.g. "create_container").
    """

    def __init__(self, message: str, *, operation: str) -> None:
        super().__init__(message)
        self.operation = operation

    def to_payload(self) -> ExecutionError:
        """Return the structured fields for the failure log event."""
        return ExecutionError(
            error=str(self),
            error_type=type(self).__name__,
            operation=self.operation,
        )


class CredentialError(ActivityError):
    """Raised when the shared-key credential cannot be constructed."""


class ContainerCreateError(ActivityError):
    """Raised when container creation fails for a reason other than a conflict."""


class LocalFileError(ActivityError):
    """Raised when the local payload file cannot be written or read back."""


class BlobUploadError(ActivityError):
    """Raised when the block blob upload fails."""


class BlobListError(ActivityError):
    """Raised when fetching any page of the blob listing fails.

    Blobs accumulated from earlier pages are discarded.
    """
