"""JSON implementations of the decoding protocols."""

from __future__ import annotations

import json
from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


class JsonDocumentParser:
    """Parse bodies with the standard ``json`` module into plain Python data."""

    def parse(self, content: bytes) -> Any:
        return json.loads(content)


class PydanticObjectDecoder:
    """
    Decode JSON bodies into any type pydantic can validate.

    Works for pydantic models, dataclasses, TypedDicts and generic
    containers such as ``list[Todo]``. Adapters are cached per type.

    Example:
        decoder = PydanticObjectDecoder()
        todos = decoder.decode(b'[{"id": 1, "title": "x"}]', list[Todo])
    """

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter] = {}

    def _adapter(self, response_type: Any) -> TypeAdapter:
        try:
            return self._adapters[response_type]
        except KeyError:
            adapter = TypeAdapter(response_type)
            self._adapters[response_type] = adapter
            return adapter
        except TypeError:
            # Unhashable type hints are not cached
            return TypeAdapter(response_type)

    def decode(self, content: bytes, response_type: type[T]) -> T:
        return self._adapter(response_type).validate_json(content)
