"""Publishing - HTTP client and publish orchestration."""

from .client import (
    FailureKind,
    PublishClient,
    PublishResult,
    build_endpoint_url,
    interpret_response,
)
from .service import (
    BatchResult,
    EndpointNotConfiguredError,
    PreparedNote,
    Publisher,
    PublishOutcome,
)

__all__ = [
    "BatchResult",
    "EndpointNotConfiguredError",
    "FailureKind",
    "PreparedNote",
    "PublishClient",
    "PublishOutcome",
    "PublishResult",
    "Publisher",
    "build_endpoint_url",
    "interpret_response",
]
