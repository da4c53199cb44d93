"""Recommendation processing module."""

from dataclasses import dataclass
from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.config.settings import settings
from app.errors import ModerationError, RateLimitError, UpstreamError, ValidationError
from app.process.request_builder import build_recommendation_request
from app.schemas.api import (
    IMDB_ID_PATTERN,
    NO_PREFERENCES_ERROR,
    RecommendationItem,
    RecommendationList,
    SearchOptions,
)
from app.utils.input_validator import validate_text
from app.utils.logger import get_logger
from app.utils.openai_client import create_structured_response, get_openai_client, moderate_text
from app.utils.prompt_registry import PromptRegistry
from app.utils.rate_limiter import ServerRateLimiter

logger = get_logger(__name__)

SCHEMA_NAME = "movie_recommendations"


def recommendation_schema(max_items: int) -> dict:
    """JSON schema the model output must satisfy."""
    return {
        "type": "object",
        "properties": {
            "list": {
                "type": "array",
                "maxItems": max_items,
                "items": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "year": {"type": "integer"},
                        "imdbId": {"type": "string", "pattern": IMDB_ID_PATTERN},
                    },
                    "required": ["title", "year", "imdbId"],
                    "additionalProperties": False,
                },
            }
        },
        "required": ["list"],
        "additionalProperties": False,
    }


@dataclass
class RecommendationResult:
    items: List[RecommendationItem]
    remaining_requests: int


class MovieRecommender:
    """Runs the gated recommendation pipeline for one search request.

    The OpenAI client is created lazily so that rate limiting and input checks
    still answer when the provider key is missing.
    """

    def __init__(
        self,
        limiter: ServerRateLimiter,
        client_factory: Callable = get_openai_client,
        prompt_registry: Optional[PromptRegistry] = None,
        max_description_length: int = settings.MAX_DESCRIPTION_LENGTH,
        max_recommendations: int = settings.MAX_RECOMMENDATIONS,
    ):
        self.limiter = limiter
        self.client_factory = client_factory
        self.prompt_registry = prompt_registry or PromptRegistry()
        self.max_description_length = max_description_length
        self.max_recommendations = max_recommendations

    def get_instructions(self, prompt_version: int = 1) -> str:
        return self.prompt_registry.render(
            "recommend/movie_recommender", prompt_version, max_recommendations=self.max_recommendations
        )

    def get_recommendations(self, options: SearchOptions, client_id: str) -> RecommendationResult:
        if not self.limiter.check_limit(client_id):
            logger.warning("Rate limit exceeded for client %s", client_id)
            raise RateLimitError("Rate limit exceeded. Please try again later.")

        if not options.has_content():
            raise ValidationError(NO_PREFERENCES_ERROR)

        if options.has_description:
            validation = validate_text(options.description, self.max_description_length)
            if not validation.is_valid:
                logger.info("Rejected description (reason=%s)", validation.reason)
                raise ValidationError(validation.error)

        client = self.client_factory()

        if options.has_description:
            flagged, categories = moderate_text(client, options.description)
            if flagged:
                logger.info("Description flagged by moderation: %s", categories)
                raise ModerationError(categories)

        request = build_recommendation_request(options)
        logger.info(
            "Requesting recommendations (model=%s, live_search=%s): %s ...",
            request.model,
            request.use_live_search,
            request.prompt[:200],
        )

        output_text = create_structured_response(
            client,
            model=request.model,
            instructions=self.get_instructions(),
            user_input=request.prompt,
            schema_name=SCHEMA_NAME,
            schema=recommendation_schema(self.max_recommendations),
            use_web_search=request.use_live_search,
        )

        try:
            parsed = RecommendationList.model_validate_json(output_text or "")
        except PydanticValidationError as e:
            logger.error("Failed to parse structured OpenAI response: %s", repr(e), exc_info=True)
            raise UpstreamError("Recommendation service returned an invalid response") from e

        logger.info("Generated %s recommendations", len(parsed.list))
        return RecommendationResult(
            items=parsed.list,
            remaining_requests=self.limiter.get_remaining(client_id),
        )
