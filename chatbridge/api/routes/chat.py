"""Browser-facing chat endpoint."""

import json
import logging
from typing import Any, Mapping

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from ...core import ChatForwarder, ConfigurationError, InvalidRequestError
from ...types.chat import ChatMessage
from ...types.results import to_error_payload

logger = logging.getLogger("chatbridge")


def get_forwarder(request: Request) -> ChatForwarder:
    """Build the forwarder for this request from the injected settings.

    Raises:
        ConfigurationError: If no API key is configured.
    """
    settings = request.app.state.settings
    transport = getattr(request.app.state, "upstream_transport", None)
    return ChatForwarder(settings.backend(), transport=transport)


def parse_json_object(body: bytes) -> Mapping[str, Any]:
    try:
        payload = json.loads(body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidRequestError("Invalid JSON payload", code="invalid_json") from exc
    if not isinstance(payload, Mapping):
        raise InvalidRequestError(
            "Request body must be a JSON object", code="invalid_json_shape"
        )
    return payload


def parse_chat_messages(body: bytes) -> list[ChatMessage]:
    """Validate a ``POST /api/chat`` body and return its messages.

    An empty ``messages`` list is accepted; roles other than system/user are
    not rejected, the translator maps them to the model side.
    """
    payload = parse_json_object(body)
    messages = payload.get("messages")
    if messages is None:
        raise InvalidRequestError("You must provide a messages array", code="missing_parameter")
    if not isinstance(messages, list):
        raise InvalidRequestError("messages must be an array", code="invalid_parameter")

    parsed: list[ChatMessage] = []
    for index, message in enumerate(messages):
        if not isinstance(message, Mapping):
            raise InvalidRequestError(
                f"messages[{index}] must be an object", code="invalid_parameter"
            )
        role = message.get("role")
        content = message.get("content")
        if not isinstance(role, str) or not isinstance(content, str):
            raise InvalidRequestError(
                f"messages[{index}] must have string 'role' and 'content' fields",
                code="invalid_parameter",
            )
        parsed.append({"role": role, "content": content})
    return parsed


async def chat(request: Request) -> Response:
    """Forward a conversation upstream and return the normalized reply.

    POST /api/chat
    """
    logger.info(f"Handling {request.method} request to {request.url.path}")

    try:
        forwarder = get_forwarder(request)
    except ConfigurationError as exc:
        logger.error(f"Refusing chat request: {exc.message}")
        return JSONResponse(to_error_payload(exc.message), status_code=500)

    body = await request.body()
    try:
        messages = parse_chat_messages(body)
    except InvalidRequestError as exc:
        logger.error(f"Invalid chat request ({exc.code}): {exc.message}")
        return JSONResponse(to_error_payload(exc.message), status_code=400)

    result = await forwarder.complete(messages)
    logger.info(f"Chat request finished with {type(result).__name__} ({result.status_code})")
    return JSONResponse(result.to_payload(), status_code=result.status_code)
