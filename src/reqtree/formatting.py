"""Text helpers and the human-readable request dump."""

from __future__ import annotations

import json
import logging

from .models.descriptor import RequestDescriptor

logger = logging.getLogger(__name__)


def to_text(content: bytes) -> str:
    """Decode UTF-8, returning an empty string for invalid input."""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return ""


def pretty_json(content: bytes) -> str:
    """Re-indent a JSON body, or return an empty string if it is not JSON."""
    try:
        document = json.loads(content)
    except ValueError as e:
        logger.debug(f"Body is not JSON: {e}")
        return ""
    return json.dumps(document, indent=2, ensure_ascii=False)


def describe(descriptor: RequestDescriptor) -> str:
    """
    Render a folded request for logs and debugging.

    Headers are shown as sent (last value per name wins) and the body is
    pretty-printed when it is JSON.
    """
    headers = json.dumps(descriptor.effective_headers())
    return "\n".join(
        [
            "Beginning of Request.",
            "----------------------------------",
            f"Endpoint: {descriptor.method.value} {descriptor.url}",
            "__________________________________",
            f"Headers: {headers}",
            "__________________________________",
            f"Body: {pretty_json(descriptor.body)}",
            "___________________________________",
            "End Of Request.",
        ]
    )
