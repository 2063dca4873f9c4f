"""Transport protocol and the default aiohttp transport."""

from .client import AiohttpTransport
from .protocols import HttpResponse, Transport

__all__ = [
    "AiohttpTransport",
    "HttpResponse",
    "Transport",
]
