"""
LLM tagging service integration.

Sends batches of contacts to a chat model (an OpenAI-compatible endpoint such
as DeepSeek, or Gemini) and gets JSON tag assignments back.

File: llm/__init__.py
Created: 2026-10-13
"""

from .client import (
    GeminiTaggingClient,
    OpenAITaggingClient,
    TaggingClient,
    build_tagging_client,
)
from .prompts import SYSTEM_PROMPT, build_user_message

__all__ = [
    "GeminiTaggingClient",
    "OpenAITaggingClient",
    "TaggingClient",
    "build_tagging_client",
    "SYSTEM_PROMPT",
    "build_user_message",
]
