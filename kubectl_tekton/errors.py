"""
Error taxonomy for the Tekton Results client.

Every failure raised by this package derives from ResultsError so the
command layer can report it with a single handler. The subclasses let a
caller tell a rejected call (ProtocolError) from an accepted call whose
payload could not be read (DecodingError).
"""

from typing import Optional


class ResultsError(Exception):
    """Base class for all client failures."""


class ConfigurationError(ResultsError, ValueError):
    """Malformed endpoint, credentials or resource alias.

    Raised before any network call is made.
    """


class TransportError(ResultsError):
    """Connection failure or aborted exchange."""


class RequestTimeoutError(TransportError, TimeoutError):
    """The configured per-request timeout elapsed."""


class ProtocolError(ResultsError):
    """The server answered with a status other than 200 OK."""

    def __init__(self, status_code: int, reason: str, url: Optional[str] = None):
        super().__init__(reason)
        self.status_code = status_code
        self.reason = reason
        self.url = url


class DecodingError(ResultsError):
    """A 200 OK body could not be mapped onto the expected message."""


class UnimplementedError(ResultsError, NotImplementedError):
    """The operation is declared but not provided by the REST transport."""

    def __init__(self, operation: str):
        super().__init__(f"{operation} is not implemented by the REST client")
        self.operation = operation


class PaginationError(ResultsError):
    """The server returned a continuation token that was already used."""
