"""Request, session, auth and settings models."""

from .auth import Auth, AuthType
from .config import DEFAULT_USER_AGENT, ClientSettings
from .descriptor import HttpMethod, RequestDescriptor, RequestDraft
from .session import CachePolicyType, SessionConfig

__all__ = [
    # Request
    "HttpMethod",
    "RequestDescriptor",
    "RequestDraft",
    # Session
    "CachePolicyType",
    "SessionConfig",
    # Auth
    "Auth",
    "AuthType",
    # Settings
    "ClientSettings",
    "DEFAULT_USER_AGENT",
]
