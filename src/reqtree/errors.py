"""Exception hierarchy for request building, transport and decoding."""

from __future__ import annotations

from enum import Enum


class RequestError(Exception):
    """Base class for every error raised or delivered by reqtree."""


class BuildError(RequestError):
    """The parameter tree could not be folded into a request."""


class MissingTargetError(BuildError):
    """No ``Url`` node was found anywhere in the tree."""

    def __init__(self) -> None:
        super().__init__("Request must contain exactly one Url, found none")


class MultipleTargetsError(BuildError):
    """More than one ``Url`` node was found in the tree."""

    def __init__(self, targets: list[str]) -> None:
        self.targets = targets
        super().__init__(f"Request must contain exactly one Url, found {len(targets)}: {targets}")


class InvalidTargetError(BuildError):
    """The ``Url`` node does not hold an absolute http(s) address."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Not an absolute http(s) URL: {target!r}")


class TransportError(RequestError):
    """The network call itself failed (connection, timeout, size limit)."""

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class DecodeKind(str, Enum):
    """Which consumer a decode failure belongs to."""

    DOCUMENT = "document"
    OBJECT = "object"


class DecodeError(RequestError):
    """A response body could not be decoded for one consumer."""

    def __init__(self, kind: DecodeKind, message: str) -> None:
        self.kind = kind
        super().__init__(f"{kind.value} decoding failed: {message}")
