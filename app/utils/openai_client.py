"""OpenAI API client for moderation and structured recommendation responses.

Calls are single-attempt: the SDK's own retries are disabled and failures are
raised as UpstreamError for the caller to surface.
"""

from typing import Any, Dict, List, Optional, Tuple

import openai

from app.config.settings import settings
from app.errors import ConfigError, UpstreamError
from app.utils.logger import get_logger

logger = get_logger(__name__)

WEB_SEARCH_TOOL = {"type": "web_search_preview"}


def get_openai_client():
    """Configure and return the OpenAI Python client instance."""
    if not settings.OPENAI_API_KEY:
        logger.error("OpenAI API key not configured")
        raise ConfigError("Recommendation service temporarily unavailable")
    return openai.OpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_API_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        max_retries=0,
    )


def moderate_text(client, text: str) -> Tuple[bool, List[str]]:
    """Run the provider moderation check. Returns (flagged, flagged category names)."""
    try:
        moderation = client.moderations.create(input=text)
    except openai.OpenAIError as e:
        logger.error("OpenAI moderation request failed: %s", repr(e), exc_info=True)
        raise UpstreamError("Content moderation failed") from e

    result = moderation.results[0]
    categories = result.categories.model_dump(by_alias=True)
    flagged_categories = [name for name, hit in categories.items() if hit]
    return bool(result.flagged), flagged_categories


def create_structured_response(
    client,
    model: str,
    instructions: str,
    user_input: str,
    schema_name: str,
    schema: Dict[str, Any],
    use_web_search: bool = False,
) -> str:
    """Request a completion constrained to `schema` and return its raw JSON text."""
    kwargs: Dict[str, Any] = {
        "model": model,
        "instructions": instructions,
        "input": user_input,
        "text": {
            "format": {
                "type": "json_schema",
                "name": schema_name,
                "schema": schema,
                "strict": True,
            }
        },
    }
    if use_web_search:
        kwargs["tools"] = [WEB_SEARCH_TOOL]

    try:
        response = client.responses.create(**kwargs)
    except openai.OpenAIError as e:
        logger.error("OpenAI responses request failed: %s", repr(e), exc_info=True)
        raise UpstreamError("Recommendation service request failed") from e

    status: Optional[str] = getattr(response, "status", None)
    if status != "completed":
        logger.error("OpenAI response not completed (status=%s)", status)
        raise UpstreamError(f"Responses API error: {status}")
    return response.output_text
