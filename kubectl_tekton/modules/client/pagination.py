"""
Pagination driver for list operations.

Pages are requested one at a time: the next request is only issued when
the caller asks for the next page, after the previous response has been
fully decoded. Items keep the order the server returned them in.
"""

import logging
from typing import Any, Callable, Iterator, Set, TypeVar

from ...errors import PaginationError
from ..models import Message

logger = logging.getLogger(__name__)

Req = TypeVar("Req", bound=Message)
Resp = TypeVar("Resp", bound=Message)


def iter_pages(list_call: Callable[[Req], Resp], request: Req) -> Iterator[Resp]:
    """
    Yield every page of a list operation.

    The first call is made with an empty continuation token; each
    non-empty next_page_token is echoed back in the following request.

    Args:
        list_call: A capability's list method
        request: List request carrying the caller's filter and page size

    Raises:
        PaginationError: If the server hands out a token a second time
    """
    request = request.model_copy(update={"page_token": ""})
    seen: Set[str] = set()
    page_number = 0

    while True:
        page = list_call(request)
        page_number += 1
        logger.debug(f"Fetched page {page_number} ({len(page.items)} items)")
        yield page

        token = page.next_page_token
        if not token:
            return
        if token in seen:
            raise PaginationError(f"server repeated continuation token {token!r}")
        seen.add(token)
        request = request.model_copy(update={"page_token": token})


def iter_items(list_call: Callable[[Req], Any], request: Req) -> Iterator[Any]:
    """Yield the items of every page, in server order."""
    for page in iter_pages(list_call, request):
        yield from page.items
