"""Single-call forwarding of a chat conversation to the upstream provider."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping, Optional

import httpx

from ..messages.translator import (
    build_gemini_payload,
    openai_to_canonical_response,
    to_canonical_response,
    to_openai_request,
)
from ..types.results import ChatResult, TransportFailure, UpstreamRejection
from .backend import (
    PROVIDER_GEMINI,
    PROVIDER_OPENAI,
    Backend,
    build_outbound_headers,
    format_httpx_error,
)

logger = logging.getLogger("chatbridge")

JSON_RESPONSE_HINTS = {
    PROVIDER_GEMINI: {"response_mime_type": "application/json"},
    PROVIDER_OPENAI: {"type": "json_object"},
}


class ChatForwarder:
    """Translate a conversation, send it upstream once, translate the answer.

    No retries and no timeout unless the backend sets one: a hanging upstream
    holds the calling request until it answers.
    """

    def __init__(
        self,
        backend: Backend,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.backend = backend
        self._transport = transport

    def build_body(
        self, messages: Iterable[Mapping[str, Any]], json_response: bool = False
    ) -> dict[str, Any]:
        hint = JSON_RESPONSE_HINTS.get(self.backend.provider) if json_response else None
        if self.backend.provider == PROVIDER_OPENAI:
            return to_openai_request(messages, self.backend.model, response_format=hint)
        return build_gemini_payload(messages, generation_config=hint)

    def interpret(self, status_code: int, body: Any) -> ChatResult:
        if self.backend.provider == PROVIDER_OPENAI:
            return openai_to_canonical_response(status_code, body)
        return to_canonical_response(status_code, body)

    async def complete(
        self, messages: Iterable[Mapping[str, Any]], json_response: bool = False
    ) -> ChatResult:
        """Run one upstream call for ``messages``.

        Args:
            messages: Canonical messages, already validated.
            json_response: Ask the provider for a JSON-formatted answer.

        Returns:
            A ``ChatResult``; transport problems become ``TransportFailure``
            rather than propagating.
        """
        url = self.backend.build_url()
        body = self.build_body(messages, json_response=json_response)
        headers = build_outbound_headers(self.backend)

        logger.info(
            "Forwarding %d message(s) to %s model %s",
            len(body.get("contents") or body.get("messages") or []),
            self.backend.provider,
            self.backend.model,
        )
        try:
            async with httpx.AsyncClient(
                timeout=self.backend.timeout, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=body)
        except httpx.HTTPError as exc:
            detail = format_httpx_error(exc, self.backend)
            logger.error("Upstream request failed: %s", detail)
            return TransportFailure(detail)

        logger.debug("Received upstream response: status %s", resp.status_code)
        try:
            data = resp.json() if resp.content else None
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.error(
                "Upstream returned a non-JSON body (status %s, %d bytes)",
                resp.status_code,
                len(resp.content),
            )
            if resp.is_success:
                return UpstreamRejection("Upstream returned an invalid response.", 500)
            data = None

        result = self.interpret(resp.status_code, data)
        if isinstance(result, UpstreamRejection):
            logger.warning(
                "Upstream rejected request with status %s: %s",
                result.status_code,
                result.message,
            )
        return result
