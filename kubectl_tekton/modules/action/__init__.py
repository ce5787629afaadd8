"""
Action Module - Black Box Interface

Purpose: Caller-side flows used by the commands (list records, find logs)
Interface: ListOptions, build_filter(), list_records(), iter_records(),
           log_name_for(), nested_mapping(), fetch_log()
Hidden: CEL filter syntax, wildcard parent naming, log annotation key

Can be replaced with server-side saved queries without touching the client.
"""

from .action import (
    LOG_ANNOTATION,
    ListOptions,
    build_filter,
    fetch_log,
    iter_records,
    list_records,
    list_request,
    log_name_for,
    nested_mapping,
    parse_list,
    parse_pairs,
)

__all__ = [
    "LOG_ANNOTATION",
    "ListOptions",
    "build_filter",
    "fetch_log",
    "iter_records",
    "list_records",
    "list_request",
    "log_name_for",
    "nested_mapping",
    "parse_list",
    "parse_pairs",
]
