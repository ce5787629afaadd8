"""
Transport Module - Black Box Interface

Purpose: Map typed Results requests onto REST/HTTP exchanges
Interface: RESTTransport.send(), RESTTransport.fetch(), project_query(), build_path()
Hidden: httpx client, auth headers, TLS context, status and error mapping

Can be replaced with a generated gRPC client exposing the same operations.
"""

from .paths import BASE_PATH, LOGS, RECORDS, RESULTS, build_path, split_name
from .query import project_query, render_value
from .transport import RESTTransport

__all__ = [
    "BASE_PATH",
    "RESULTS",
    "RECORDS",
    "LOGS",
    "RESTTransport",
    "build_path",
    "split_name",
    "project_query",
    "render_value",
]
