"""Transport-level session configuration folded from session parameters."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class CachePolicyType(str, Enum):
    """How the transport should treat intermediary caches."""

    DEFAULT = "default"
    RELOAD = "reload"
    PREFER_CACHE = "prefer_cache"
    ONLY_CACHE = "only_cache"

    @property
    def cache_control(self) -> Optional[str]:
        """Cache-Control request directive for this policy, if any."""
        return _CACHE_CONTROL[self]


_CACHE_CONTROL = {
    CachePolicyType.DEFAULT: None,
    CachePolicyType.RELOAD: "no-cache",
    CachePolicyType.PREFER_CACHE: "max-stale",
    CachePolicyType.ONLY_CACHE: "only-if-cached",
}


class SessionConfig(BaseModel):
    """
    Session-wide options for a single call.

    Only parameters implementing ``SessionParam`` write here, during the
    same traversal that builds the ``RequestDescriptor``.

    Example:
        config = SessionConfig()
        config.timeout = 5.0
        config.headers.append(("User-Agent", "reqtree"))
    """

    headers: list[tuple[str, str]] = Field(
        default_factory=list,
        description="Default headers sent with the request, overridden by request headers",
    )
    timeout: Optional[float] = Field(None, gt=0, description="Per-request read timeout in seconds")
    resource_timeout: Optional[float] = Field(
        None,
        gt=0,
        description="Total time allowed for the whole exchange in seconds",
    )
    cache_policy: CachePolicyType = Field(CachePolicyType.DEFAULT, description="Cache behavior")
    follow_redirects: bool = Field(True, description="Follow HTTP redirects")
    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")

    model_config = {"extra": "forbid", "validate_assignment": True}
