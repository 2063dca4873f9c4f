"""aiohttp implementation of the Transport protocol."""

from __future__ import annotations

import logging

import aiohttp

from ..models.config import ClientSettings
from ..models.descriptor import RequestDescriptor
from ..models.session import SessionConfig
from .protocols import HttpResponse

logger = logging.getLogger(__name__)


class AiohttpTransport:
    """
    Transport that performs each request on a fresh aiohttp session.

    A session is opened per call and configured from the folded
    ``SessionConfig``, so calls never share session state. No retries are
    performed; a failure surfaces as the underlying aiohttp exception.

    Features:
    - Session default headers, overridden by request headers
    - Cache policy mapped to a Cache-Control request header
    - Content size limit to prevent memory exhaustion
    - Per-read and total timeouts

    Example:
        transport = AiohttpTransport(ClientSettings(default_timeout=10))
        descriptor, config = fold(CombinedParams(Url("https://example.com")))
        response = await transport.send(descriptor, config)
    """

    def __init__(self, settings: ClientSettings | None = None) -> None:
        """
        Initialize the transport.

        Args:
            settings: Process-wide defaults (User-Agent, timeout, size limit)
        """
        self._settings = settings or ClientSettings()

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def _build_headers(self, descriptor: RequestDescriptor, config: SessionConfig) -> dict[str, str]:
        """
        Merge session defaults with request headers.

        Precedence, lowest first: User-Agent default, session headers, cache
        policy directive, request headers (last value per name).
        """
        merged: dict[str, tuple[str, str]] = {"user-agent": ("User-Agent", self._settings.user_agent)}
        for name, value in config.headers:
            merged[name.lower()] = (name, value)

        directive = config.cache_policy.cache_control
        if directive:
            merged["cache-control"] = ("Cache-Control", directive)

        for name, value in descriptor.effective_headers().items():
            merged[name.lower()] = (name, value)
        return dict(merged.values())

    def _build_timeout(self, config: SessionConfig) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=config.resource_timeout,
            sock_read=config.timeout or self._settings.default_timeout,
        )

    async def send(self, descriptor: RequestDescriptor, config: SessionConfig) -> HttpResponse:
        """
        Perform one HTTP request.

        Args:
            descriptor: Folded request
            config: Folded session configuration

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            aiohttp.ClientError: On network errors
            asyncio.TimeoutError: When a timeout elapses
            ValueError: On content size exceeded
        """
        max_size = self._settings.max_content_size
        async with (
            aiohttp.ClientSession(timeout=self._build_timeout(config)) as session,
            session.request(
                descriptor.method.value,
                descriptor.url,
                headers=self._build_headers(descriptor, config),
                data=descriptor.body or None,
                proxy=config.proxy,
                allow_redirects=config.follow_redirects,
            ) as response,
        ):
            # Check Content-Length if available
            content_length = response.headers.get("Content-Length")
            if content_length and content_length.isdigit() and int(content_length) > max_size:
                raise ValueError(f"Content too large: {content_length} bytes")

            # Read content with size limit
            content = b""
            async for chunk in response.content.iter_chunked(8192):
                content += chunk
                if len(content) > max_size:
                    raise ValueError(f"Content size limit exceeded: >{max_size} bytes")

            logger.debug(f"{descriptor.method.value} {descriptor.url}: {response.status}, {len(content)} bytes")

            return HttpResponse(
                status_code=response.status,
                content=content,
                content_type=response.headers.get("Content-Type", ""),
                headers=dict(response.headers),
                url=str(response.url),
            )
