"""
Shared pytest fixtures for kubectl-tekton tests.

This module provides common fixtures including:
- ResultsServerMocker: Fake Tekton Results REST gateway on httpx.MockTransport
- Record/log payload builders
- A ResultsClient wired to the fake server
"""

import base64
import json
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kubectl_tekton.config.provider import ResultsConfig, VersionOverride
from kubectl_tekton.modules.client import ResultsClient

API_ROOT = "/apis/results.tekton.dev/v1alpha2/parents"
HOST = "https://results.example.com"


# =============================================================================
# Fake Results Server
# =============================================================================

@dataclass
class ServerResponse:
    """A canned HTTP response."""
    status_code: int = 200
    json_body: Optional[Any] = None
    content: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    def to_httpx(self) -> httpx.Response:
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body, headers=self.headers)
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)


@dataclass
class ServerCall:
    """Record of a request received by the fake server."""
    method: str
    path: str
    raw_path: str
    params: Dict[str, str]
    headers: httpx.Headers
    body: bytes
    response: Optional[ServerResponse] = None


class ResultsServerMocker:
    """
    Fake Results REST gateway with exact method/path matching.

    Usage:
        def test_get_result(results_server, client):
            results_server.register("GET", "/default/results/r1", ServerResponse(
                json_body={"name": "default/results/r1"}
            ))

            result = client.results.get(GetResultRequest(name="default/results/r1"))

            assert results_server.call_count == 1
    """

    def __init__(self):
        self._routes: List[tuple] = []
        self._call_history: List[ServerCall] = []
        self._default_response = ServerResponse(status_code=404, content=b"not found")

    def register(
        self,
        method: str,
        path: str,
        response: Union[ServerResponse, Exception],
        params: Optional[Dict[str, str]] = None,
    ) -> "ResultsServerMocker":
        """
        Register a response.

        Args:
            method: HTTP method
            path: Raw path below the API root, e.g. "/default/results/-/records"
            response: Response to return, or an exception to raise
            params: Query parameters that must all match (subset)

        Returns:
            self for chaining
        """
        self._routes.append((method.upper(), API_ROOT + path, params or {}, response))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        raw_path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        params = dict(request.url.params)
        response: Union[ServerResponse, Exception] = self._default_response
        for method, path, wanted, candidate in self._routes:
            if method != request.method or path != raw_path:
                continue
            if all(params.get(k) == v for k, v in wanted.items()):
                response = candidate
                break

        call = ServerCall(
            method=request.method,
            path=request.url.path,
            raw_path=raw_path,
            params=params,
            headers=request.headers,
            body=request.read(),
            response=response if isinstance(response, ServerResponse) else None,
        )
        self._call_history.append(call)

        if isinstance(response, Exception):
            raise response
        return response.to_httpx()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def calls(self) -> List[ServerCall]:
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)


# =============================================================================
# Payload builders
# =============================================================================

def run_object(
    name: str,
    kind: str = "PipelineRun",
    uid: str = "uid-1",
    annotations: Optional[Dict[str, str]] = None,
    reason: str = "Succeeded",
    start_time: Optional[str] = None,
    completion_time: Optional[str] = None,
) -> Dict[str, Any]:
    """A minimal stored Tekton run object."""
    status: Dict[str, Any] = {"conditions": [{"type": "Succeeded", "status": "True", "reason": reason}]}
    if start_time:
        status["startTime"] = start_time
    if completion_time:
        status["completionTime"] = completion_time
    return {
        "apiVersion": "tekton.dev/v1beta1",
        "kind": kind,
        "metadata": {
            "name": name,
            "namespace": "demo",
            "uid": uid,
            "annotations": annotations or {},
        },
        "status": status,
    }


def record_json(name: str, obj: Dict[str, Any], data_type: str = "tekton.dev/v1beta1.PipelineRun") -> Dict[str, Any]:
    """Wire JSON of a Record carrying ``obj`` as its payload."""
    return {
        "name": name,
        "uid": f"{name}-uid",
        "data": {
            "type": data_type,
            "value": base64.b64encode(json.dumps(obj).encode("utf-8")).decode("ascii"),
        },
        "etag": "etag-1",
        "createTime": "2024-05-01T10:00:00Z",
        "updateTime": "2024-05-01T10:05:00Z",
    }


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def results_server():
    """Fresh fake Results server."""
    return ResultsServerMocker()


@pytest.fixture
def results_config():
    """Configuration pointing at the fake server."""
    return ResultsConfig(
        host=HOST,
        token="secret-token",
        timeout=5.0,
        version_override=VersionOverride(),
    )


@pytest.fixture
def client(results_server, results_config):
    """ResultsClient backed by the fake server."""
    with ResultsClient.from_config(results_config, transport=results_server.transport) as c:
        yield c
