"""Domain port definitions for adapters."""

from __future__ import annotations

from .credentials import CredentialProvider
from .source import (
    SourceOrderFetcher,
    SourceOrderFetchResult,
    SourceStatusWriter,
    WriteStatusResult,
)
from .target import TargetOrderGateway, TargetOrderLoader

__all__ = [
    "CredentialProvider",
    "SourceOrderFetchResult",
    "SourceOrderFetcher",
    "SourceStatusWriter",
    "TargetOrderGateway",
    "TargetOrderLoader",
    "WriteStatusResult",
]
