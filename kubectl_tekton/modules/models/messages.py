"""
Tekton Results v1alpha2 messages.

These models mirror the JSON form of the Results API resources and the
request/response envelopes the REST gateway accepts. Wire names follow
the API's lowerCamelCase JSON mapping.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BeforeValidator, PlainSerializer

from ...errors import DecodingError
from .fields import FieldRole, Message, decode_base64, encode_base64, wire

WireBytes = Annotated[
    bytes,
    BeforeValidator(decode_base64),
    PlainSerializer(encode_base64, return_type=str, when_used="json"),
]

# int64 values travel as JSON strings
WireInt64 = Annotated[int, PlainSerializer(str, return_type=str, when_used="json")]


class Status(str, Enum):
    """Completion status of a summarized record."""

    UNKNOWN = "UNKNOWN"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"


_STATUS_BY_NUMBER = list(Status)


def _status_from_wire(value: Any) -> Any:
    # Enums may arrive by number; unknown numbers map to UNKNOWN
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < len(_STATUS_BY_NUMBER):
            return _STATUS_BY_NUMBER[value]
        return Status.UNKNOWN
    return value


WireStatus = Annotated[Status, BeforeValidator(_status_from_wire)]


# Resources


class RecordSummary(Message):
    """Denormalized overview of the primary record of a Result."""

    record: str = wire("record", default="")
    type: str = wire("type", default="")
    start_time: Optional[datetime] = wire("startTime", default=None)
    end_time: Optional[datetime] = wire("endTime", default=None)
    status: WireStatus = wire("status", default=Status.UNKNOWN)
    annotations: Dict[str, str] = wire("annotations", default_factory=dict)


class Result(Message):
    """Grouping of records produced by one pipeline execution."""

    name: str = wire("name", FieldRole.IDENTITY, default="")
    id: str = wire("id", default="")
    uid: str = wire("uid", default="")
    created_time: Optional[datetime] = wire("createdTime", default=None)
    create_time: Optional[datetime] = wire("createTime", default=None)
    updated_time: Optional[datetime] = wire("updatedTime", default=None)
    update_time: Optional[datetime] = wire("updateTime", default=None)
    annotations: Dict[str, str] = wire("annotations", default_factory=dict)
    etag: str = wire("etag", default="")
    summary: Optional[RecordSummary] = wire("summary", default=None)


class TypedPayload(Message):
    """Opaque record payload: a type tag plus the encoded object."""

    type: str = wire("type", default="")
    value: WireBytes = wire("value", FieldRole.BINARY, default=b"")


class Record(Message):
    """A single unit of execution data stored under a Result."""

    name: str = wire("name", FieldRole.IDENTITY, default="")
    id: str = wire("id", default="")
    uid: str = wire("uid", default="")
    data: Optional[TypedPayload] = wire("data", default=None)
    etag: str = wire("etag", default="")
    created_time: Optional[datetime] = wire("createdTime", default=None)
    create_time: Optional[datetime] = wire("createTime", default=None)
    updated_time: Optional[datetime] = wire("updatedTime", default=None)
    update_time: Optional[datetime] = wire("updateTime", default=None)

    def decode_data(self) -> Dict[str, Any]:
        """
        Parse the stored object carried in data.value.

        Returns:
            The decoded JSON object, or an empty dict when there is no payload

        Raises:
            DecodingError: If the payload is not a JSON object
        """
        if self.data is None or not self.data.value:
            return {}
        try:
            obj = json.loads(self.data.value)
        except ValueError as e:
            raise DecodingError(f"record {self.name} payload is not JSON: {e}") from e
        if not isinstance(obj, dict):
            raise DecodingError(f"record {self.name} payload is not a JSON object")
        return obj


class Log(Message):
    """A log blob addressed by name."""

    name: str = wire("name", FieldRole.IDENTITY, default="")
    data: WireBytes = wire("data", FieldRole.BINARY, default=b"")


class LogSummary(Message):
    record: str = wire("record", default="")
    bytes_received: WireInt64 = wire("bytesReceived", default=0)


class Empty(Message):
    pass


# Requests


class GetResultRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")


class DeleteResultRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")


class ListResultsRequest(Message):
    """List Results under a parent, e.g. "default" or "-" for all."""

    parent: str = wire("parent", FieldRole.IDENTITY, default="")
    filter: str = wire("filter", default="")
    page_size: int = wire("pageSize", default=0)
    page_token: str = wire("pageToken", default="")
    order_by: str = wire("orderBy", default="")


class CreateResultRequest(Message):
    parent: str = wire("parent", FieldRole.IDENTITY, default="")
    result: Optional[Result] = wire("result", default=None)


class UpdateResultRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")
    result: Optional[Result] = wire("result", default=None)
    etag: str = wire("etag", default="")


class GetRecordRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")


class DeleteRecordRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")


class ListRecordsRequest(Message):
    """List Records under a Result, e.g. "default/results/-"."""

    parent: str = wire("parent", FieldRole.IDENTITY, default="")
    filter: str = wire("filter", default="")
    page_size: int = wire("pageSize", default=0)
    page_token: str = wire("pageToken", default="")
    order_by: str = wire("orderBy", default="")


class CreateRecordRequest(Message):
    parent: str = wire("parent", FieldRole.IDENTITY, default="")
    record: Optional[Record] = wire("record", default=None)


class UpdateRecordRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")
    record: Optional[Record] = wire("record", default=None)
    etag: str = wire("etag", default="")


class GetLogRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")


class DeleteLogRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")


class ListLogsRequest(Message):
    parent: str = wire("parent", FieldRole.IDENTITY, default="")
    filter: str = wire("filter", default="")
    page_size: int = wire("pageSize", default=0)
    page_token: str = wire("pageToken", default="")
    order_by: str = wire("orderBy", default="")


class CreateLogRequest(Message):
    parent: str = wire("parent", FieldRole.IDENTITY, default="")
    log: Optional[Log] = wire("log", default=None)


class UpdateLogRequest(Message):
    name: str = wire("name", FieldRole.IDENTITY, default="")
    log: Optional[Log] = wire("log", default=None)


# Responses


class ListResultsResponse(Message):
    results: List[Result] = wire("results", default_factory=list)
    next_page_token: str = wire("nextPageToken", default="")

    @property
    def items(self) -> List[Result]:
        return self.results


class ListRecordsResponse(Message):
    """Page of records; log listings share this envelope."""

    records: List[Record] = wire("records", default_factory=list)
    next_page_token: str = wire("nextPageToken", default="")

    @property
    def items(self) -> List[Record]:
        return self.records
