"""Canonical request descriptor and the mutable draft it is folded from."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlencode, urlsplit, urlunsplit

from ..errors import InvalidTargetError, MissingTargetError, MultipleTargetsError


class HttpMethod(str, Enum):
    """HTTP verbs accepted by ``Method``."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Immutable result of folding a parameter tree.

    Attributes:
        method: HTTP verb
        url: Absolute URL including the folded query string
        headers: Ordered (name, value) pairs; duplicates are kept in order
        body: Request body, empty when none was set
    """

    method: HttpMethod
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""

    def header(self, name: str) -> str | None:
        """Return the authoritative (last) value for a header name."""
        values = self.get_all(name)
        return values[-1] if values else None

    def get_all(self, name: str) -> list[str]:
        """Return every value recorded for a header name, in order."""
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def effective_headers(self) -> dict[str, str]:
        """Collapse the multimap so the last value for each name wins."""
        collapsed: dict[str, tuple[str, str]] = {}
        for key, value in self.headers:
            collapsed.pop(key.lower(), None)
            collapsed[key.lower()] = (key, value)
        return dict(collapsed.values())


@dataclass
class RequestDraft:
    """In-progress request that parameter nodes write into during a fold."""

    targets: list[str] = field(default_factory=list)
    method: HttpMethod = HttpMethod.GET
    headers: list[tuple[str, str]] = field(default_factory=list)
    query: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    def finish(self) -> RequestDescriptor:
        """
        Validate the draft and freeze it into a descriptor.

        Raises:
            MissingTargetError: No target was set
            MultipleTargetsError: More than one target was set
            InvalidTargetError: The target is not an absolute http(s) URL
        """
        if not self.targets:
            raise MissingTargetError()
        if len(self.targets) > 1:
            raise MultipleTargetsError(list(self.targets))

        target = self.targets[0]
        parts = urlsplit(target)
        if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
            raise InvalidTargetError(target)

        query = parts.query
        if self.query:
            extra = urlencode(self.query)
            query = f"{query}&{extra}" if query else extra

        url = urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
        return RequestDescriptor(
            method=self.method,
            url=url,
            headers=tuple(self.headers),
            body=self.body,
        )
