"""Concrete parameter nodes: target, method, query, body and session options."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel

from ..errors import BuildError
from ..models.descriptor import HttpMethod, RequestDraft
from ..models.session import CachePolicyType, SessionConfig
from .base import CombinedParams


@dataclass(frozen=True)
class Url:
    """Absolute target address. A request needs exactly one."""

    address: str

    def build_param(self, draft: RequestDraft) -> None:
        draft.targets.append(self.address)


@dataclass(frozen=True)
class Method:
    """HTTP verb for the request. Defaults to GET when absent."""

    verb: Union[HttpMethod, str]

    def __post_init__(self) -> None:
        if not isinstance(self.verb, HttpMethod):
            object.__setattr__(self, "verb", HttpMethod(str(self.verb).upper()))

    def build_param(self, draft: RequestDraft) -> None:
        draft.method = HttpMethod(self.verb)


@dataclass(frozen=True)
class Query:
    """
    One query string item, appended after any query already in the Url.

    Example:
        Query("page", 2)
        Query.items({"sort": "asc", "limit": 50})
    """

    name: str
    value: Any

    def build_param(self, draft: RequestDraft) -> None:
        value = self.value
        if isinstance(value, bool):
            value = "true" if value else "false"
        draft.query.append((self.name, "" if value is None else str(value)))

    @classmethod
    def items(cls, mapping: Mapping[str, Any]) -> CombinedParams:
        """Group several query items, keeping mapping order."""
        return CombinedParams(*(cls(name, value) for name, value in mapping.items()))


@dataclass(frozen=True)
class Body:
    """
    Request body.

    ``bytes`` are sent as-is and ``str`` as UTF-8. Pydantic models and any
    other JSON-encodable value are serialized to JSON and, unless
    ``content_type`` is given, tagged ``application/json``.
    """

    content: Any
    content_type: Optional[str] = None

    def _encode(self) -> tuple[bytes, Optional[str]]:
        content = self.content
        if isinstance(content, (bytes, bytearray)):
            return bytes(content), None
        if isinstance(content, str):
            return content.encode("utf-8"), None
        if isinstance(content, BaseModel):
            return content.model_dump_json().encode("utf-8"), "application/json"
        try:
            return json.dumps(content).encode("utf-8"), "application/json"
        except (TypeError, ValueError) as e:
            raise BuildError(f"Body is not JSON encodable: {e}") from e

    def build_param(self, draft: RequestDraft) -> None:
        body, implied_type = self._encode()
        draft.body = body
        content_type = self.content_type or implied_type
        if content_type:
            draft.headers.append(("Content-Type", content_type))


@dataclass(frozen=True)
class SessionOption:
    """
    Set one ``SessionConfig`` field by name.

    Unknown keys and invalid values are reported as ``BuildError`` when the
    tree is folded.

    Example:
        SessionOption("proxy", "http://proxy.local:3128")
        SessionOption("follow_redirects", False)
    """

    key: str
    value: Any

    def build_param(self, draft: RequestDraft) -> None:
        pass

    def build_configuration(self, config: SessionConfig) -> None:
        try:
            setattr(config, self.key, self.value)
        except ValueError as e:
            raise BuildError(f"Invalid session option {self.key}={self.value!r}: {e}") from e


class TimeoutScope(str, Enum):
    """Which timeout a ``Timeout`` node sets."""

    REQUEST = "request"
    RESOURCE = "resource"


@dataclass(frozen=True)
class Timeout:
    """Transport timeout in seconds, per read (request) or for the whole exchange (resource)."""

    seconds: float
    scope: TimeoutScope = TimeoutScope.REQUEST

    def build_param(self, draft: RequestDraft) -> None:
        pass

    def build_configuration(self, config: SessionConfig) -> None:
        key = "timeout" if TimeoutScope(self.scope) == TimeoutScope.REQUEST else "resource_timeout"
        SessionOption(key, self.seconds).build_configuration(config)


@dataclass(frozen=True)
class CachePolicy:
    """Cache behavior for the session."""

    policy: CachePolicyType

    def build_param(self, draft: RequestDraft) -> None:
        pass

    def build_configuration(self, config: SessionConfig) -> None:
        SessionOption("cache_policy", self.policy).build_configuration(config)


@dataclass(frozen=True)
class SessionHeader:
    """Default header set on the session; request headers of the same name win."""

    name: str
    value: str

    def build_param(self, draft: RequestDraft) -> None:
        pass

    def build_configuration(self, config: SessionConfig) -> None:
        config.headers.append((self.name, self.value))
