"""
REST transport for the Tekton Results API.

Executes one logical RPC as one HTTP exchange. Authentication, TLS and the
timeout are resolved once when the transport is built and reused for every
call. There is no retry, caching or pipelining: a failed exchange is
reported once.
"""

import logging
import ssl
from typing import Optional, Sequence, Type, TypeVar
from urllib.parse import urlsplit

import httpx

from ... import __version__
from ...config.provider import ResultsConfig
from ...errors import (
    ConfigurationError,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
)
from ..models import Message
from .paths import BASE_PATH, build_path
from .query import project_query

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Message)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class RESTTransport:
    """
    HTTP transport for typed Results requests.

    Instances are meant for sequential reuse by a single caller; use one
    transport per thread if calls must run concurrently.
    """

    def __init__(
        self,
        config: ResultsConfig,
        base_path: str = BASE_PATH,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize transport.

        Args:
            config: Results endpoint configuration
            base_path: Versioned API root prepended to every resource path
            transport: Optional httpx transport (used by tests)

        Raises:
            ConfigurationError: If the endpoint or TLS material is unusable
        """
        config.validate()
        parts = urlsplit(config.host)
        self.origin = f"{parts.scheme}://{parts.netloc}"
        self.base_path = base_path
        self.timeout = config.timeout

        self._client = httpx.Client(
            headers=self._headers(config),
            verify=self._verify(config),
            timeout=httpx.Timeout(config.timeout),
            follow_redirects=False,
            transport=transport,
        )

        if parts.scheme == "http":
            logger.warning("Using HTTP without TLS - credentials are sent in clear text")
        logger.debug(f"REST transport initialized for {self.origin}")

    @staticmethod
    def _headers(config: ResultsConfig) -> httpx.Headers:
        items = [
            ("Accept", "application/json"),
            ("User-Agent", f"kubectl-tekton/{__version__}"),
        ]
        if config.token:
            items.append(("Authorization", f"Bearer {config.token}"))

        # Impersonate-Group and Impersonate-Extra-* may repeat
        imp = config.impersonation
        if imp.user:
            items.append(("Impersonate-User", imp.user))
        if imp.uid:
            items.append(("Impersonate-Uid", imp.uid))
        items.extend(("Impersonate-Group", group) for group in imp.groups)
        for key, values in imp.extra.items():
            items.extend((f"Impersonate-Extra-{key}", value) for value in values)
        return httpx.Headers(items)

    @staticmethod
    def _verify(config: ResultsConfig):
        tls = config.tls
        if tls.insecure_skip_verify:
            return False
        if not tls.ca_file and not tls.cert_file:
            return True
        try:
            context = ssl.create_default_context(cafile=tls.ca_file)
            if tls.cert_file:
                context.load_cert_chain(tls.cert_file, tls.key_file)
        except (OSError, ssl.SSLError) as e:
            raise ConfigurationError(f"cannot load TLS material: {e}") from e
        return context

    def url_for(self, segments: Sequence[str]) -> str:
        return self.origin + build_path(self.base_path, *segments)

    def send(
        self,
        method: str,
        segments: Sequence[str],
        message: Message,
        response_type: Type[M],
    ) -> M:
        """
        Execute a request and decode the JSON response.

        Args:
            method: HTTP method
            segments: Resource segments appended to the base path
            message: Typed request, projected into the query string and,
                for POST/PUT/PATCH, encoded as the JSON body
            response_type: Message type to decode a 200 OK body into

        Returns:
            Decoded response message

        Raises:
            TransportError: Connection failure or timeout
            ProtocolError: Any status other than 200 OK
            DecodingError: The body does not fit response_type
        """
        body = self._exchange(method, segments, message)
        return response_type.from_json(body)

    def fetch(self, method: str, segments: Sequence[str], message: Message) -> bytes:
        """Execute a request and return the raw response body unmodified."""
        return self._exchange(method, segments, message)

    def _exchange(self, method: str, segments: Sequence[str], message: Message) -> bytes:
        method = method.upper()
        url = self.url_for(segments)

        content = None
        headers = {}
        if method in BODY_METHODS:
            content = message.to_json()
            headers["Content-Type"] = "application/json"

        request = self._client.build_request(
            method, url, params=project_query(message), content=content, headers=headers
        )
        logger.debug(f"{method} {request.url}")

        try:
            response = self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"{method} {url}: timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url}: {e}") from e

        try:
            logger.debug(f"{method} {request.url} -> {response.status_code}")
            if response.status_code != httpx.codes.OK:
                reason = httpx.codes.get_reason_phrase(response.status_code)
                raise ProtocolError(
                    response.status_code,
                    reason or f"HTTP {response.status_code}",
                    str(request.url),
                )
            try:
                return response.read()
            except httpx.TimeoutException as e:
                raise RequestTimeoutError(f"{method} {url}: timed out reading response") from e
            except httpx.HTTPError as e:
                raise TransportError(f"{method} {url}: {e}") from e
        finally:
            response.close()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RESTTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

