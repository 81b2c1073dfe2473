"""Operation outcomes and results.

These types answer: "What did an evaluation produce?"

IMPORTANT:
- EvalResult.done is always True once evaluate() returns; the host decides
  what to do with a non-None error.
- ActivityResult.outputs only ever holds complete results. Partial listings
  never reach it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from azure.storage.blob import BlobProperties


@dataclass(frozen=True)
class BlobDescriptor:
    """Provider metadata for a single listed blob."""

    name: str
    size: int | None = None
    last_modified: datetime | None = None
    content_type: str | None = None
    etag: str | None = None
    blob_type: str | None = None

    @classmethod
    def from_properties(cls, properties: BlobProperties) -> BlobDescriptor:
        """Build a descriptor from the SDK's BlobProperties."""
        content_settings = properties.content_settings
        blob_type = properties.blob_type
        return cls(
            name=properties.name,
            size=properties.size,
            last_modified=properties.last_modified,
            content_type=content_settings.content_type if content_settings is not None else None,
            etag=properties.etag,
            # BlobType is a str enum; store the plain value
            blob_type=str(blob_type.value) if hasattr(blob_type, "value") else blob_type,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable representation."""
        return {
            "name": self.name,
            "size": self.size,
            "last_modified": self.last_modified.isoformat() if self.last_modified is not None else None,
            "content_type": self.content_type,
            "etag": self.etag,
            "blob_type": self.blob_type,
        }


@dataclass(frozen=True)
class ActivityResult:
    """Outputs produced by a successful execution.

    Upload produces no outputs; list produces {"result": {name: BlobDescriptor}}.
    """

    outputs: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> ActivityResult:
        return cls()

    @classmethod
    def listing(cls, blobs: dict[str, BlobDescriptor]) -> ActivityResult:
        return cls(outputs={"result": blobs})


@dataclass(frozen=True)
class EvalResult:
    """Outcome of a single evaluate() call as seen by the host runtime."""

    done: bool
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls) -> EvalResult:
        return cls(done=True)

    @classmethod
    def failure(cls, error: Exception) -> EvalResult:
        return cls(done=True, error=error)
