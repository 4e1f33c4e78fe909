"""
Change detection and tag synthesis.

File: tagging/__init__.py
Created: 2026-10-13
"""

from .detector import classify_contact, detect_changes
from .synthesizer import (
    DEFAULT_BATCH_SIZE,
    MalformedResponseError,
    build_batch_payload,
    chunk,
    extend_vocabulary,
    parse_tag_response,
    synthesize_tags,
    tag_batch,
)

__all__ = [
    "classify_contact",
    "detect_changes",
    "DEFAULT_BATCH_SIZE",
    "MalformedResponseError",
    "build_batch_payload",
    "chunk",
    "extend_vocabulary",
    "parse_tag_response",
    "synthesize_tags",
    "tag_batch",
]
