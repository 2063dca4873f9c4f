"""Pydantic configuration model for the default transport and logging."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = "reqtree/1.0 (+aiohttp)"


class ClientSettings(BaseModel):
    """
    Process-wide settings for ``AiohttpTransport``.

    Per-request options (timeouts, cache policy, proxy) live in
    ``SessionConfig`` and take precedence over these defaults.

    Example:
        settings = ClientSettings(default_timeout=10.0)

    YAML format:
        user_agent: my-app/2.0
        default_timeout: 10
        max_content_size: 1048576
        log_level: DEBUG
    """

    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header sent by default")
    default_timeout: float = Field(30.0, gt=0, description="Timeout used when the session sets none")
    max_content_size: int = Field(
        50 * 1024 * 1024,
        ge=1,
        description="Maximum response body size in bytes",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize settings to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ClientSettings":
        """Load settings from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ClientSettings":
        """Load settings from YAML file."""
        return cls.from_yaml(path.read_text())
