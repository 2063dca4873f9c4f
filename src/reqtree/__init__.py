"""
reqtree - Declarative HTTP requests with typed result callbacks.

Usage:
    from reqtree import AnyRequest, Header, MediaType, Url

    AnyRequest(
        Url("https://api.example.com/todos"),
        Header.accept(MediaType.JSON),
        response_type=list[Todo],
    ).on_object(show_todos).on_error(report).update_every(30).call()
"""

__version__ = "1.0.0"

from .core import (
    AnyRequest,
    CallbackSet,
    Executor,
    Interval,
    Request,
    ResponseDispatcher,
    ResultKind,
    Signal,
    UpdateScheduler,
    every,
    merge,
)
from .decoding import DocumentParser, JsonDocumentParser, ObjectDecoder, PydanticObjectDecoder
from .errors import (
    BuildError,
    DecodeError,
    DecodeKind,
    InvalidTargetError,
    MissingTargetError,
    MultipleTargetsError,
    RequestError,
    TransportError,
)
from .formatting import describe
from .http import AiohttpTransport, HttpResponse, Transport
from .models import (
    Auth,
    AuthType,
    CachePolicyType,
    ClientSettings,
    HttpMethod,
    RequestDescriptor,
    SessionConfig,
)
from .params import (
    Body,
    CachePolicy,
    CombinedParams,
    Header,
    MediaType,
    Method,
    Query,
    SessionHeader,
    SessionOption,
    Timeout,
    TimeoutScope,
    Url,
    fold,
)

__all__ = [
    "__version__",
    # Request
    "AnyRequest",
    "Request",
    # Parameters
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
    "fold",
    # Models
    "Auth",
    "AuthType",
    "CachePolicyType",
    "ClientSettings",
    "HttpMethod",
    "RequestDescriptor",
    "SessionConfig",
    # Pipeline
    "CallbackSet",
    "Executor",
    "ResponseDispatcher",
    "ResultKind",
    "describe",
    # Updates
    "Interval",
    "Signal",
    "UpdateScheduler",
    "every",
    "merge",
    # Collaborators
    "AiohttpTransport",
    "DocumentParser",
    "HttpResponse",
    "JsonDocumentParser",
    "ObjectDecoder",
    "PydanticObjectDecoder",
    "Transport",
    # Errors
    "BuildError",
    "DecodeError",
    "DecodeKind",
    "InvalidTargetError",
    "MissingTargetError",
    "MultipleTargetsError",
    "RequestError",
    "TransportError",
]
