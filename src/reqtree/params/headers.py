"""Header parameter and shortcuts for common header names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from ..errors import BuildError
from ..models.auth import Auth
from ..models.descriptor import RequestDraft

HeaderValue = Union[str, Callable[[], str]]


class MediaType(str, Enum):
    """Common media types for Accept and Content-Type."""

    JSON = "application/json"
    XML = "application/xml"
    TEXT = "text/plain"
    HTML = "text/html"
    FORM = "application/x-www-form-urlencoded"
    MULTIPART = "multipart/form-data"
    OCTET_STREAM = "application/octet-stream"


@dataclass(frozen=True)
class Header:
    """
    A request header.

    The value may be a zero-argument callable, evaluated on every fold. This
    lets repeated calls (for example from ``update_every``) pick up values
    that change between calls, such as a rotating token.

    Later headers with the same name do not remove earlier ones; the last
    one is authoritative when the request is sent.

    Example:
        Header("X-Request-Source", "dashboard")
        Header("X-Token", lambda: token_store.current)
        Header.accept(MediaType.JSON)
    """

    name: str
    value: HeaderValue

    def resolve(self) -> str:
        """Current header value."""
        value = self.value() if callable(self.value) else self.value
        return value.value if isinstance(value, Enum) else str(value)

    def build_param(self, draft: RequestDraft) -> None:
        try:
            value = self.resolve()
        except Exception as e:
            raise BuildError(f"Header {self.name!r} value failed: {e}") from e
        draft.headers.append((self.name, value))

    @classmethod
    def accept(cls, media_type: Union[MediaType, str]) -> Header:
        return cls("Accept", media_type)

    @classmethod
    def authorization(cls, auth: Auth) -> Header:
        return cls("Authorization", auth.value)

    @classmethod
    def cache_control(cls, directive: str) -> Header:
        return cls("Cache-Control", directive)

    @classmethod
    def content_length(cls, length: int) -> Header:
        return cls("Content-Length", str(length))

    @classmethod
    def content_type(cls, media_type: Union[MediaType, str]) -> Header:
        return cls("Content-Type", media_type)

    @classmethod
    def host(cls, host: str, port: int | None = None) -> Header:
        return cls("Host", host if port is None else f"{host}:{port}")

    @classmethod
    def origin(cls, origin: str) -> Header:
        return cls("Origin", origin)

    @classmethod
    def referer(cls, url: str) -> Header:
        return cls("Referer", url)

    @classmethod
    def user_agent(cls, agent: str) -> Header:
        return cls("User-Agent", agent)
