"""Executor - performs exactly one network call per invocation."""

from __future__ import annotations

import logging

from ..errors import TransportError
from ..http.protocols import HttpResponse, Transport
from ..models.descriptor import RequestDescriptor
from ..models.session import SessionConfig

logger = logging.getLogger(__name__)


class Executor:
    """
    Sends a folded request through a Transport.

    One ``execute`` call is one ``transport.send`` call: no retries and no
    timeout of its own beyond what the ``SessionConfig`` carries. Any
    failure raised by the transport is re-raised as ``TransportError`` with
    the original exception chained.

    Example:
        executor = Executor(AiohttpTransport())
        descriptor, config = fold(root)
        response = await executor.execute(descriptor, config)
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def execute(self, descriptor: RequestDescriptor, config: SessionConfig) -> HttpResponse:
        """
        Perform the request.

        Args:
            descriptor: Folded request
            config: Folded session configuration

        Returns:
            HttpResponse for any HTTP status

        Raises:
            TransportError: If the transport failed to produce a response
        """
        method = descriptor.method.value
        logger.debug(f"Sending {method} {descriptor.url}")

        try:
            response = await self._transport.send(descriptor, config)
        except TransportError:
            raise
        except Exception as e:
            logger.debug(f"Transport error for {method} {descriptor.url}: {e}")
            raise TransportError(f"{method} {descriptor.url} failed: {e}", url=descriptor.url) from e

        logger.debug(f"Received {response.status_code} for {method} {descriptor.url}")
        return response
