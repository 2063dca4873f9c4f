"""Pluggable decoders for structured documents and typed objects."""

from .json import JsonDocumentParser, PydanticObjectDecoder
from .protocols import DocumentParser, ObjectDecoder

__all__ = [
    "DocumentParser",
    "JsonDocumentParser",
    "ObjectDecoder",
    "PydanticObjectDecoder",
]
