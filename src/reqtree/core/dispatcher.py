"""Response dispatch - fans one outcome out to the registered consumers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from ..decoding.protocols import DocumentParser, ObjectDecoder
from ..errors import DecodeError, DecodeKind
from ..formatting import to_text
from ..http.protocols import HttpResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResultKind(str, Enum):
    """Kinds of result a caller can subscribe to."""

    BYTES = "bytes"
    TEXT = "text"
    DOCUMENT = "document"
    OBJECT = "object"
    STATUS_CODE = "status_code"
    ERROR = "error"


_SLOTS = {
    ResultKind.BYTES: "on_data",
    ResultKind.TEXT: "on_string",
    ResultKind.DOCUMENT: "on_json",
    ResultKind.OBJECT: "on_object",
    ResultKind.STATUS_CODE: "on_status_code",
    ResultKind.ERROR: "on_error",
}


@dataclass(frozen=True)
class CallbackSet(Generic[T]):
    """
    At most one consumer per result kind.

    ``register`` returns a copy; registering a kind again replaces the
    previous consumer.
    """

    on_data: Optional[Callable[[bytes], Any]] = None
    on_string: Optional[Callable[[str], Any]] = None
    on_json: Optional[Callable[[Any], Any]] = None
    on_object: Optional[Callable[[T], Any]] = None
    on_status_code: Optional[Callable[[int], Any]] = None
    on_error: Optional[Callable[[Exception], Any]] = None

    def register(self, kind: ResultKind, callback: Callable[[Any], Any]) -> CallbackSet[T]:
        return replace(self, **{_SLOTS[kind]: callback})

    def get(self, kind: ResultKind) -> Optional[Callable[[Any], Any]]:
        return getattr(self, _SLOTS[kind])


class ResponseDispatcher:
    """
    Delivers a response, or a failure, to a CallbackSet.

    For a response every registered consumer is tried independently: a body
    that fails to parse as a document or to decode into the response type
    is reported to the error consumer and never stops the other consumers.
    Exceptions raised by a consumer itself are logged and isolated too.

    Example:
        dispatcher = ResponseDispatcher(JsonDocumentParser(), PydanticObjectDecoder())
        dispatcher.dispatch(response, callbacks, list[Todo])
    """

    def __init__(self, document_parser: DocumentParser, object_decoder: ObjectDecoder) -> None:
        self._document_parser = document_parser
        self._object_decoder = object_decoder

    def _invoke(self, kind: ResultKind, callback: Callable[[Any], Any], value: Any) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception(f"{kind.value} callback raised")

    def dispatch(self, response: HttpResponse, callbacks: CallbackSet[T], response_type: Any = bytes) -> None:
        """
        Deliver a successful response.

        Args:
            response: Response produced by the executor
            callbacks: Registered consumers
            response_type: Type the object consumer expects
        """
        content = response.content

        if callbacks.on_data is not None:
            self._invoke(ResultKind.BYTES, callbacks.on_data, content)

        if callbacks.on_string is not None:
            self._invoke(ResultKind.TEXT, callbacks.on_string, to_text(content))

        if callbacks.on_json is not None:
            try:
                document = self._document_parser.parse(content)
            except Exception as e:
                self._decode_failed(DecodeKind.DOCUMENT, e, callbacks)
            else:
                self._invoke(ResultKind.DOCUMENT, callbacks.on_json, document)

        if callbacks.on_object is not None:
            try:
                decoded = self._object_decoder.decode(content, response_type)
            except Exception as e:
                self._decode_failed(DecodeKind.OBJECT, e, callbacks)
            else:
                self._invoke(ResultKind.OBJECT, callbacks.on_object, decoded)

        if callbacks.on_status_code is not None:
            self._invoke(ResultKind.STATUS_CODE, callbacks.on_status_code, response.status_code)

    def _decode_failed(self, kind: DecodeKind, cause: Exception, callbacks: CallbackSet[T]) -> None:
        error = DecodeError(kind, str(cause))
        error.__cause__ = cause
        self.dispatch_error(error, callbacks)

    def dispatch_error(self, error: Exception, callbacks: CallbackSet[T]) -> None:
        """
        Deliver a failure to the error consumer.

        Without an error consumer the failure is dropped; it is only logged.
        """
        if callbacks.on_error is None:
            logger.debug(f"Dropping unhandled {type(error).__name__}: {error}")
            return
        self._invoke(ResultKind.ERROR, callbacks.on_error, error)
