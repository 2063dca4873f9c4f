"""Fold a parameter tree into a request descriptor and session configuration."""

from __future__ import annotations

import logging

from ..errors import BuildError
from ..models.descriptor import RequestDescriptor, RequestDraft
from ..models.session import SessionConfig
from .base import CombinedParams, Param, SessionParam

logger = logging.getLogger(__name__)


def _visit(node: Param, draft: RequestDraft, config: SessionConfig) -> None:
    if isinstance(node, CombinedParams):
        for child in node.children:
            _visit(child, draft, config)
        return

    try:
        node.build_param(draft)
        if isinstance(node, SessionParam):
            node.build_configuration(config)
    except BuildError:
        raise
    except Exception as e:
        raise BuildError(f"{type(node).__name__} failed to build: {e}") from e


def fold(root: Param) -> tuple[RequestDescriptor, SessionConfig]:
    """
    Fold a parameter tree, depth-first and left to right.

    Every node writes into the draft request; nodes implementing
    ``SessionParam`` also write into the session configuration during the
    same visit.

    Args:
        root: Single parameter or ``CombinedParams`` tree

    Returns:
        Tuple of (descriptor, session configuration)

    Raises:
        BuildError: Missing, duplicate or invalid target, or an invalid
            session option or body, or any other failure raised by a node
    """
    draft = RequestDraft()
    config = SessionConfig()
    _visit(root, draft, config)
    descriptor = draft.finish()
    logger.debug(f"Folded request: {descriptor.method.value} {descriptor.url}")
    return descriptor, config
