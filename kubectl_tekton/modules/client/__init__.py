"""
Client Module - Black Box Interface

Purpose: Results, Records and Logs capabilities over the REST transport
Interface: ResultsClient(.results/.records/.logs), iter_pages(), iter_items()
Hidden: Path segments per operation, continuation token bookkeeping

Can be replaced with a gRPC-backed client with the same capability groups.
"""

from .client import (
    Capability,
    LogsCapability,
    RecordsCapability,
    ResultsCapability,
    ResultsClient,
)
from .pagination import iter_items, iter_pages

__all__ = [
    "Capability",
    "ResultsCapability",
    "RecordsCapability",
    "LogsCapability",
    "ResultsClient",
    "iter_pages",
    "iter_items",
]
