"""Parameter nodes and the fold that turns them into a request."""

from .base import CombinedParams, Param, RequestParam, SessionParam
from .fold import fold
from .headers import Header, MediaType
from .nodes import (
    Body,
    CachePolicy,
    Method,
    Query,
    SessionHeader,
    SessionOption,
    Timeout,
    TimeoutScope,
    Url,
)

__all__ = [
    # Protocols
    "Param",
    "RequestParam",
    "SessionParam",
    # Nodes
    "Body",
    "CachePolicy",
    "CombinedParams",
    "Header",
    "MediaType",
    "Method",
    "Query",
    "SessionHeader",
    "SessionOption",
    "Timeout",
    "TimeoutScope",
    "Url",
    # Folding
    "fold",
]
