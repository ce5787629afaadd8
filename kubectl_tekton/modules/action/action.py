"""
Record listing and log lookup on top of the Results client.

Records of every Result in a namespace live under the wildcard parent
"<namespace>/results/-"; the list is narrowed with a CEL filter built from
the selected kind, name, uid, labels, annotations, finalizers and
owner references.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from ...errors import ConfigurationError, DecodingError
from ..client import ResultsClient, iter_items
from ..models import GetLogRequest, ListRecordsRequest, ListRecordsResponse, Record
from ..resolver import GroupVersionKind

logger = logging.getLogger(__name__)

LOG_ANNOTATION = "results.tekton.dev/log"
ALL_RESULTS = "-"


@dataclass
class ListOptions:
    """What to list and how to narrow it."""

    gvk: GroupVersionKind
    namespace: str
    name: str = ""
    uid: str = ""
    labels: str = ""
    annotations: str = ""
    finalizers: str = ""
    owner_references: str = ""
    filter: str = ""
    limit: int = 10
    order_by: str = ""

    @property
    def parent(self) -> str:
        if not self.namespace:
            raise ConfigurationError("namespace must be specified")
        return f"{self.namespace}/results/{ALL_RESULTS}"


def parse_pairs(value: str, what: str = "labels") -> Dict[str, str]:
    """
    Parse "k=v,k2=v2" into a mapping.

    Raises:
        ConfigurationError: If a pair has no "=" or an empty key
    """
    pairs: Dict[str, str] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, val = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(f"invalid {what} selector {item!r}, expected key=value")
        pairs[key] = val.strip()
    return pairs


def parse_list(value: str) -> List[str]:
    """Parse "a,b" into its non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _owner_clause(reference: str) -> str:
    kind, sep, name = reference.partition("/")
    if not sep:
        return f"data.metadata.ownerReferences.exists(o, o.name == {_literal(reference)})"
    if not kind or not name:
        raise ConfigurationError(
            f"invalid owner reference {reference!r}, expected name or kind/name"
        )
    return (
        "data.metadata.ownerReferences.exists(o, "
        f"o.kind == {_literal(kind)} && o.name == {_literal(name)})"
    )


def _literal(value: str) -> str:
    # JSON string escaping is valid CEL string syntax
    return json.dumps(value)


def build_filter(options: ListOptions) -> str:
    """Build the CEL filter expression for a record listing."""
    clauses: List[str] = [f"data_type == {_literal(options.gvk.data_type)}"]
    if options.name:
        clauses.append(f"data.metadata.name == {_literal(options.name)}")
    if options.uid:
        clauses.append(f"data.metadata.uid == {_literal(options.uid)}")
    for key, val in parse_pairs(options.labels, "labels").items():
        clauses.append(f"data.metadata.labels[{_literal(key)}] == {_literal(val)}")
    for key, val in parse_pairs(options.annotations, "annotations").items():
        clauses.append(f"data.metadata.annotations[{_literal(key)}] == {_literal(val)}")
    for finalizer in parse_list(options.finalizers):
        clauses.append(f"{_literal(finalizer)} in data.metadata.finalizers")
    for reference in parse_list(options.owner_references):
        clauses.append(_owner_clause(reference))
    if options.filter.strip():
        clauses.append(f"({options.filter.strip()})")
    return " && ".join(clauses)


def list_request(options: ListOptions) -> ListRecordsRequest:
    return ListRecordsRequest(
        parent=options.parent,
        filter=build_filter(options),
        page_size=options.limit,
        order_by=options.order_by,
    )


def list_records(
    client: ResultsClient, options: ListOptions, page_token: str = ""
) -> ListRecordsResponse:
    """List a single page of matching records."""
    request = list_request(options).model_copy(update={"page_token": page_token})
    logger.debug(f"Listing records under {request.parent} where {request.filter}")
    return client.records.list(request)


def iter_records(client: ResultsClient, options: ListOptions) -> Iterator[Record]:
    """Yield every matching record across all pages."""
    return iter_items(client.records.list, list_request(options))


def log_name_for(record: Record) -> Optional[str]:
    """
    Find the name of the log stored for a record.

    Returns:
        The value of the results.tekton.dev/log annotation of the stored
        object, or None when it is missing or empty
    """
    annotations = nested_mapping(record.decode_data(), "metadata", "annotations")
    value = annotations.get(LOG_ANNOTATION)
    if value is not None and not isinstance(value, str):
        raise DecodingError(f"annotation {LOG_ANNOTATION} of record {record.name} is not a string")
    return value or None


def nested_mapping(obj: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    """
    Walk a stored object down ``keys``.

    Returns:
        The mapping found, or an empty dict when a key is missing or null

    Raises:
        DecodingError: If a value on the way is not a JSON object
    """
    current = obj
    for depth, key in enumerate(keys, start=1):
        value = current.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            path = ".".join(keys[:depth])
            raise DecodingError(f"stored object field {path} is not an object")
        current = value
    return current


def fetch_log(client: ResultsClient, name: str) -> bytes:
    """Fetch a log's raw bytes by name."""
    return client.logs.fetch(GetLogRequest(name=name))
