"""Authorization credentials injected as an Authorization header."""

import base64
import os
import re
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class AuthType(str, Enum):
    """Authorization schemes with a well-known header prefix."""

    BASIC = "Basic"
    BEARER = "Bearer"
    DIGEST = "Digest"
    HOBA = "HOBA"
    MUTUAL = "Mutual"
    AWS4_HMAC_SHA256 = "AWS4-HMAC-SHA256"


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Returns original value if
    the env var is not set.
    """
    if value is None:
        return None

    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replace, value)


class Auth(BaseModel):
    """
    Credentials rendered as ``<scheme> <key>``.

    ``scheme`` is either an ``AuthType`` or any custom scheme string. The
    key supports $VAR / ${VAR} environment expansion, so tokens can stay
    out of source code.

    Example:
        Auth.bearer("$GITHUB_TOKEN")
        Auth.basic("user", "secret")
        Auth(scheme="Token", key="abc123")
    """

    scheme: Union[AuthType, str] = Field(..., description="Authorization scheme")
    key: str = Field(..., description="Credential placed after the scheme")

    model_config = {"extra": "forbid", "frozen": True}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in the key after init."""
        object.__setattr__(self, "key", _expand_env_var(self.key))

    @classmethod
    def basic(cls, username: str, password: str) -> "Auth":
        """Basic auth from a username and password."""
        credentials = f"{_expand_env_var(username)}:{_expand_env_var(password)}"
        encoded = base64.b64encode(credentials.encode()).decode()
        return cls(scheme=AuthType.BASIC, key=encoded)

    @classmethod
    def bearer(cls, token: str) -> "Auth":
        """Bearer token auth."""
        return cls(scheme=AuthType.BEARER, key=token)

    @property
    def value(self) -> str:
        """Full Authorization header value."""
        scheme = self.scheme.value if isinstance(self.scheme, AuthType) else self.scheme
        return f"{scheme} {self.key}"
