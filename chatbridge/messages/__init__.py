"""Chat message translation helpers.

Provides translation between the canonical role-tagged message list and the
Gemini and OpenAI request/response formats.
"""

from .translator import (
    build_gemini_payload,
    extract_texts,
    openai_to_canonical_response,
    to_canonical_response,
    to_openai_request,
    to_provider_request,
)

__all__ = [
    "build_gemini_payload",
    "extract_texts",
    "openai_to_canonical_response",
    "to_canonical_response",
    "to_openai_request",
    "to_provider_request",
]
