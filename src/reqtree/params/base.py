"""Protocols and the composite node that make up a parameter tree."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

from ..models.descriptor import RequestDraft
from ..models.session import SessionConfig


@runtime_checkable
class RequestParam(Protocol):
    """
    A single request-building instruction.

    ``build_param`` is called once per fold, in tree order, and writes into
    the in-progress ``RequestDraft``.

    Example implementation:
        @dataclass(frozen=True)
        class Accept:
            value: str

            def build_param(self, draft: RequestDraft) -> None:
                draft.headers.append(("Accept", self.value))
    """

    def build_param(self, draft: RequestDraft) -> None:
        """Apply this parameter to the draft request."""
        ...


@runtime_checkable
class SessionParam(Protocol):
    """
    Capability for parameters that also affect the session.

    A node participates in the session fold only if it implements
    ``build_configuration``; the node's class does not matter.
    """

    def build_configuration(self, config: SessionConfig) -> None:
        """Apply this parameter to the session configuration."""
        ...


@dataclass(frozen=True, init=False)
class CombinedParams:
    """
    Ordered group of parameters, itself usable as a parameter.

    ``None`` children are dropped and plain lists/tuples are wrapped in a
    nested ``CombinedParams``, so optional and generated parameters compose
    without special syntax.

    Example:
        CombinedParams(
            Url("https://api.example.com/todos"),
            Header.accept(MediaType.JSON),
            Query("page", 2) if paginate else None,
            [Query("tag", tag) for tag in tags],
        )
    """

    children: tuple[Param, ...]

    def __init__(self, *children: Union[Param, Iterable[Param], None]) -> None:
        normalized: list[Param] = []
        for child in children:
            if child is None:
                continue
            if isinstance(child, (list, tuple)):
                normalized.append(CombinedParams(*child))
            else:
                normalized.append(child)
        object.__setattr__(self, "children", tuple(normalized))

    def __iter__(self) -> Iterator[Param]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)


Param = Union[RequestParam, CombinedParams]
