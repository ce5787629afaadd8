"""
Models Module - Black Box Interface

Purpose: Typed Tekton Results messages and their field role tables
Interface: Message, FieldRole, wire(), resource/request/response models
Hidden: JSON wire mapping (aliases, base64 bytes, enum names, int64 strings)

Can be replaced with generated protobuf classes exposing the same role tables.
"""

from .fields import FieldRole, Message, WireField, wire
from .messages import (
    CreateLogRequest,
    CreateRecordRequest,
    CreateResultRequest,
    DeleteLogRequest,
    DeleteRecordRequest,
    DeleteResultRequest,
    Empty,
    GetLogRequest,
    GetRecordRequest,
    GetResultRequest,
    ListLogsRequest,
    ListRecordsRequest,
    ListRecordsResponse,
    ListResultsRequest,
    ListResultsResponse,
    Log,
    LogSummary,
    Record,
    RecordSummary,
    Result,
    Status,
    TypedPayload,
    UpdateLogRequest,
    UpdateRecordRequest,
    UpdateResultRequest,
)

__all__ = [
    "FieldRole",
    "Message",
    "WireField",
    "wire",
    "Result",
    "Record",
    "RecordSummary",
    "Status",
    "TypedPayload",
    "Log",
    "LogSummary",
    "Empty",
    "GetResultRequest",
    "ListResultsRequest",
    "DeleteResultRequest",
    "CreateResultRequest",
    "UpdateResultRequest",
    "GetRecordRequest",
    "ListRecordsRequest",
    "DeleteRecordRequest",
    "CreateRecordRequest",
    "UpdateRecordRequest",
    "GetLogRequest",
    "ListLogsRequest",
    "DeleteLogRequest",
    "CreateLogRequest",
    "UpdateLogRequest",
    "ListResultsResponse",
    "ListRecordsResponse",
]
