"""
Capability client for the Tekton Results API.

Results, Records and Logs share one get/list/delete shape; the groups
differ only in their message types and collection literal. Create and
update are part of the declared surface but the REST client does not
provide them: they raise UnimplementedError.
"""

import logging
from typing import ClassVar, Generic, Optional, Type, TypeVar

import httpx

from ...config.provider import ResultsConfig
from ...errors import UnimplementedError
from ..models import (
    Empty,
    GetLogRequest,
    ListRecordsResponse,
    ListResultsResponse,
    Log,
    Message,
    Record,
    Result,
)
from ..transport import LOGS, RECORDS, RESULTS, RESTTransport

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Message)
L = TypeVar("L", bound=Message)


class Capability(Generic[R, L]):
    """Uniform operations over one Results collection."""

    kind: ClassVar[str]
    collection: ClassVar[str]
    resource_type: ClassVar[Type[Message]]
    list_type: ClassVar[Type[Message]]

    def __init__(self, transport: RESTTransport):
        self.transport = transport

    def get(self, request: Message) -> R:
        """GET the resource addressed by request.name."""
        return self.transport.send("GET", [request.name], request, self.resource_type)

    def list(self, request: Message) -> L:
        """GET one page of the collection under request.parent."""
        return self.transport.send(
            "GET", [request.parent, self.collection], request, self.list_type
        )

    def delete(self, request: Message) -> Empty:
        """DELETE the resource addressed by request.name."""
        return self.transport.send("DELETE", [request.name], request, Empty)

    def create(self, request: Message) -> R:
        raise UnimplementedError(f"Create{self.kind}")

    def update(self, request: Message) -> R:
        raise UnimplementedError(f"Update{self.kind}")


class ResultsCapability(Capability[Result, ListResultsResponse]):
    kind = "Result"
    collection = RESULTS
    resource_type = Result
    list_type = ListResultsResponse


class RecordsCapability(Capability[Record, ListRecordsResponse]):
    kind = "Record"
    collection = RECORDS
    resource_type = Record
    list_type = ListRecordsResponse


class LogsCapability(Capability[Log, ListRecordsResponse]):
    """
    Log operations.

    The service streams logs in chunks; this client fetches a log as a
    single blob and never re-encodes it.
    """

    kind = "Log"
    collection = LOGS
    resource_type = Log
    list_type = ListRecordsResponse

    def fetch(self, request: GetLogRequest) -> bytes:
        """Return the raw bytes of the log addressed by request.name."""
        data = self.transport.fetch("GET", [request.name], request)
        logger.debug(f"Fetched {len(data)} bytes of log {request.name}")
        return data

    def get(self, request: GetLogRequest) -> Log:
        return Log(name=request.name, data=self.fetch(request))


class ResultsClient:
    """
    Entry point for the Results, Records and Logs capabilities.

    All three groups share one transport, so authentication, TLS and the
    timeout are configured once.
    """

    def __init__(self, transport: RESTTransport):
        self.transport = transport
        self.results = ResultsCapability(transport)
        self.records = RecordsCapability(transport)
        self.logs = LogsCapability(transport)

    @classmethod
    def from_config(
        cls,
        config: ResultsConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "ResultsClient":
        """
        Build a client from configuration.

        Raises:
            ConfigurationError: If the configuration is unusable
        """
        return cls(RESTTransport(config, transport=transport))

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "ResultsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
