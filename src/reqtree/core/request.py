"""The request entity: a parameter tree plus callbacks and update sources."""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import AsyncIterable
from typing import Any, Callable, Generic, Optional, TypeVar

from ..decoding import JsonDocumentParser, PydanticObjectDecoder
from ..decoding.protocols import DocumentParser, ObjectDecoder
from ..errors import BuildError, TransportError
from ..formatting import describe
from ..http.client import AiohttpTransport
from ..http.protocols import Transport
from ..models.auth import Auth
from ..models.descriptor import HttpMethod, RequestDescriptor
from ..models.session import SessionConfig
from ..params import CombinedParams, Header, Param, fold
from .dispatcher import CallbackSet, ResponseDispatcher, ResultKind
from .executor import Executor
from .tasks import spawn
from .updates import UpdateScheduler, every

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AnyRequest(Generic[T]):
    """
    A declarative HTTP request with typed result callbacks.

    Every builder method returns a modified copy and leaves the original
    untouched, so partially configured requests can be shared and reused.
    The tree must contain exactly one ``Url``.

    Identity is deliberately weak: two requests are equal when their folded
    method and URL are equal, whatever their headers or bodies.

    Example:
        AnyRequest(
            Url("https://api.example.com/todos"),
            Header.accept(MediaType.JSON),
            response_type=list[Todo],
        ).on_object(
            lambda todos: print(len(todos))
        ).on_error(
            lambda error: print(error)
        ).call()
    """

    def __init__(
        self,
        *params: Param,
        response_type: Any = bytes,
        transport: Optional[Transport] = None,
        document_parser: Optional[DocumentParser] = None,
        object_decoder: Optional[ObjectDecoder] = None,
    ) -> None:
        """
        Initialize the request.

        Args:
            *params: Parameter nodes, folded in order
            response_type: Type the ``on_object`` callback receives
            transport: Transport performing the call (aiohttp by default)
            document_parser: Parser for ``on_json`` (JSON by default)
            object_decoder: Decoder for ``on_object`` (pydantic by default)
        """
        self._root: Param = CombinedParams(*params)
        self._response_type = response_type
        self._callbacks: CallbackSet[T] = CallbackSet()
        self._update_sources: tuple[AsyncIterable[Any], ...] = ()
        self._transport: Transport = transport or AiohttpTransport()
        self._document_parser: DocumentParser = document_parser or JsonDocumentParser()
        self._object_decoder: ObjectDecoder = object_decoder or PydanticObjectDecoder()

    def _modify(self, **changes: Any) -> AnyRequest[T]:
        modified = copy.copy(self)
        for name, value in changes.items():
            setattr(modified, f"_{name}", value)
        return modified

    @property
    def root(self) -> Param:
        return self._root

    @property
    def response_type(self) -> Any:
        return self._response_type

    @property
    def callbacks(self) -> CallbackSet[T]:
        return self._callbacks

    @property
    def update_sources(self) -> tuple[AsyncIterable[Any], ...]:
        return self._update_sources

    # Callbacks

    def on_data(self, callback: Callable[[bytes], Any]) -> AnyRequest[T]:
        """Set the callback run with the raw response body."""
        return self._modify(callbacks=self._callbacks.register(ResultKind.BYTES, callback))

    def on_string(self, callback: Callable[[str], Any]) -> AnyRequest[T]:
        """Set the callback run with the body decoded as UTF-8 ("" if invalid)."""
        return self._modify(callbacks=self._callbacks.register(ResultKind.TEXT, callback))

    def on_json(self, callback: Callable[[Any], Any]) -> AnyRequest[T]:
        """Set the callback run with the body parsed as a generic document."""
        return self._modify(callbacks=self._callbacks.register(ResultKind.DOCUMENT, callback))

    def on_object(self, callback: Callable[[T], Any]) -> AnyRequest[T]:
        """Set the callback run with the body decoded into ``response_type``."""
        return self._modify(callbacks=self._callbacks.register(ResultKind.OBJECT, callback))

    def on_status_code(self, callback: Callable[[int], Any]) -> AnyRequest[T]:
        """Set the callback run with the HTTP status code."""
        return self._modify(callbacks=self._callbacks.register(ResultKind.STATUS_CODE, callback))

    def on_error(self, callback: Callable[[Exception], Any]) -> AnyRequest[T]:
        """Handle build, transport and decode errors. Without it they are dropped."""
        return self._modify(callbacks=self._callbacks.register(ResultKind.ERROR, callback))

    # Tree and collaborators

    def with_authorization(self, auth: Auth) -> AnyRequest[T]:
        """
        Prepend an Authorization header to the tree.

        An Authorization header already present in the tree is visited later
        and therefore stays authoritative.
        """
        return self._modify(root=CombinedParams(Header.authorization(auth), self._root))

    def decoding(self, response_type: Any) -> AnyRequest[Any]:
        """Change the type ``on_object`` decodes into."""
        return self._modify(response_type=response_type)

    def using(
        self,
        transport: Optional[Transport] = None,
        document_parser: Optional[DocumentParser] = None,
        object_decoder: Optional[ObjectDecoder] = None,
    ) -> AnyRequest[T]:
        """Replace any of the injected collaborators."""
        changes: dict[str, Any] = {}
        if transport is not None:
            changes["transport"] = transport
        if document_parser is not None:
            changes["document_parser"] = document_parser
        if object_decoder is not None:
            changes["object_decoder"] = object_decoder
        return self._modify(**changes)

    # Updates

    def update(self, source: AsyncIterable[Any]) -> AnyRequest[T]:
        """Perform the request again on every event of ``source`` after ``call``."""
        return self._modify(update_sources=(*self._update_sources, source))

    def update_every(self, seconds: float) -> AnyRequest[T]:
        """Repeat the request periodically after ``call``."""
        return self.update(every(seconds))

    # Folding

    def build_session(self) -> tuple[RequestDescriptor, SessionConfig]:
        """
        Fold the tree.

        Raises:
            BuildError: If the tree cannot be folded
        """
        return fold(self._root)

    @property
    def descriptor(self) -> RequestDescriptor:
        return self.build_session()[0]

    @property
    def id(self) -> str:
        """
        Stable key derived from the folded method and URL.

        The absolute URL for GET requests, ``"<METHOD> <url>"`` otherwise.

        Raises:
            BuildError: If the tree cannot be folded
        """
        method, url = self._identity()
        return url if method == HttpMethod.GET else f"{method.value} {url}"

    def _identity(self) -> tuple[HttpMethod, str]:
        descriptor = self.descriptor
        return descriptor.method, descriptor.url

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnyRequest):
            return NotImplemented
        if self is other:
            return True
        try:
            return self._identity() == other._identity()
        except BuildError:
            return False

    def __hash__(self) -> int:
        try:
            return hash(self._identity())
        except BuildError:
            return id(self)

    def __repr__(self) -> str:
        try:
            target = self.id
        except BuildError as e:
            target = f"<invalid: {e}>"
        return f"{type(self).__name__}({target})"

    def describe(self) -> str:
        """Human-readable dump of the folded request."""
        return describe(self.descriptor)

    # Execution

    def _dispatcher(self) -> ResponseDispatcher:
        return ResponseDispatcher(self._document_parser, self._object_decoder)

    async def _send(self, descriptor: RequestDescriptor, config: SessionConfig) -> None:
        dispatcher = self._dispatcher()
        try:
            response = await Executor(self._transport).execute(descriptor, config)
        except TransportError as e:
            logger.debug(f"Request failed: {e}")
            dispatcher.dispatch_error(e, self._callbacks)
            return
        dispatcher.dispatch(response, self._callbacks, self._response_type)

    def _reject(self, error: BuildError) -> None:
        logger.error(f"Request not sent: {error}")
        self._dispatcher().dispatch_error(error, self._callbacks)

    async def perform(self) -> None:
        """
        Fold, send and dispatch once, ignoring update sources.

        All outcomes, including build errors, go to the callbacks; nothing
        is raised.
        """
        try:
            descriptor, config = self.build_session()
        except BuildError as e:
            self._reject(e)
            return
        await self._send(descriptor, config)

    def call(self) -> None:
        """
        Perform the request in the background and start its update sources.

        Must be called while an event loop is running. A tree that fails to
        fold is reported to ``on_error`` and nothing is sent or scheduled.
        Each call is independent; calling twice sends twice.

        Raises:
            RuntimeError: If no event loop is running
        """
        asyncio.get_running_loop()
        try:
            descriptor, config = self.build_session()
        except BuildError as e:
            self._reject(e)
            return

        spawn(self._send(descriptor, config), name=f"reqtree-call-{descriptor.url}")
        if self._update_sources:
            UpdateScheduler(self).start()

    def call_blocking(self) -> None:
        """Run ``perform`` to completion from synchronous code."""
        asyncio.run(self.perform())


# Untyped request; on_object decodes into bytes unless response_type is given
Request = AnyRequest
