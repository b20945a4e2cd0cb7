"""Single-prompt endpoint returning the model's raw (JSON) text.

Plain-text responses throughout, for clients written against the
``getAiForecast`` cloud function.
"""

import logging

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from ...core import ConfigurationError, InvalidRequestError
from ...types.results import is_success
from .chat import get_forwarder, parse_json_object

logger = logging.getLogger("chatbridge")

MISSING_KEY_MESSAGE = "API key is not configured on the server."
MISSING_PROMPT_MESSAGE = 'Request body must contain a "prompt".'
INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


async def forecast(request: Request) -> Response:
    """POST /api/forecast"""
    try:
        forwarder = get_forwarder(request)
    except ConfigurationError:
        logger.error("Refusing forecast request: API key not configured")
        return PlainTextResponse(MISSING_KEY_MESSAGE, status_code=500)

    try:
        payload = parse_json_object(await request.body())
    except InvalidRequestError as exc:
        logger.error(f"Invalid forecast request ({exc.code}): {exc.message}")
        return PlainTextResponse(MISSING_PROMPT_MESSAGE, status_code=400)

    prompt = payload.get("prompt")
    if not isinstance(prompt, str) or not prompt:
        return PlainTextResponse(MISSING_PROMPT_MESSAGE, status_code=400)

    result = await forwarder.complete(
        [{"role": "user", "content": prompt}], json_response=True
    )
    if not is_success(result):
        logger.error(f"Error proxying forecast request: {result}")
        return PlainTextResponse(INTERNAL_ERROR_MESSAGE, status_code=500)
    return PlainTextResponse(result.text, status_code=200)
