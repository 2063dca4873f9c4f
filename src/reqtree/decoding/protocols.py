"""Protocol definitions for response body decoding."""

from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class DocumentParser(Protocol):
    """
    Protocol for generic structured-document parsers.

    Implementations turn bytes into a tree of dicts, lists and scalars
    without any knowledge of the expected shape.
    """

    def parse(self, content: bytes) -> Any:
        """
        Parse a response body.

        Args:
            content: Raw response body

        Returns:
            Parsed document

        Raises:
            Exception: Any failure, including ValueError for a malformed body,
                is reported to the error consumer as a DecodeError
        """
        ...


class ObjectDecoder(Protocol):
    """
    Protocol for typed decoders.

    Implementations turn bytes into an instance of the declared response
    type, or raise if the body does not fit that type.
    """

    def decode(self, content: bytes, response_type: type[T]) -> T:
        """
        Decode a response body into ``response_type``.

        Args:
            content: Raw response body
            response_type: Declared response type of the request

        Returns:
            Decoded object

        Raises:
            Exception: Any failure, including ValueError for a mismatched body
                or an unsupported type, is reported to the error consumer
                as a DecodeError
        """
        ...
