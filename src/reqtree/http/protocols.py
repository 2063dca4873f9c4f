"""Protocol definitions for the transport abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..models.descriptor import RequestDescriptor
from ..models.session import SessionConfig


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by a Transport.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        content_type: Content-Type header value
        headers: All response headers
        url: Final URL after any redirects
    """

    status_code: int
    content: bytes
    content_type: str
    headers: dict[str, str]
    url: str


class Transport(Protocol):
    """
    Protocol for transports.

    This abstraction allows for:
    - Mock implementations in tests
    - Different backends (aiohttp, httpx, etc.)
    - Keeping sockets, TLS and pooling out of the request pipeline
    """

    async def send(self, descriptor: RequestDescriptor, config: SessionConfig) -> HttpResponse:
        """
        Perform exactly one HTTP request.

        Args:
            descriptor: Folded request (method, url, headers, body)
            config: Folded session configuration (timeouts, proxy, ...)

        Returns:
            HttpResponse for any HTTP status

        Raises:
            Exception on network errors
        """
        ...
