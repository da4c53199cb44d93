"""Turn search options into the prompt and model choice for a recommendation call."""

from dataclasses import dataclass
from typing import Optional

from app.config.settings import settings
from app.schemas.api import DEFAULT_REGION, SearchOptions

NEW_RELEASE_CATEGORIES = {"new release", "new releases"}
FRESHNESS_KEYWORDS = ("new releases", "recent")


@dataclass(frozen=True)
class RecommendationRequest:
    prompt: str
    use_live_search: bool
    model: str


def wants_live_search(options: SearchOptions) -> bool:
    """True when the user asks for new or recent titles, which needs web search."""
    if any(category.strip().lower() in NEW_RELEASE_CATEGORIES for category in options.categories):
        return True
    description = (options.description or "").lower()
    return any(keyword in description for keyword in FRESHNESS_KEYWORDS)


def build_prompt(options: SearchOptions, default_region: str = DEFAULT_REGION) -> str:
    user_input = ""
    if options.genres:
        user_input += f"I'm looking for movies that match the following genres: {', '.join(options.genres)}. "
    if options.categories:
        user_input += (
            f"Ensure the movie selections fall under the following categories: {', '.join(options.categories)}. "
        )
    if options.has_description:
        user_input += options.description.strip()

    region = (options.region or "").strip() or default_region
    return f"{user_input.strip()} I'm watching from {region}, so favour movies available there.".strip()


def build_recommendation_request(
    options: SearchOptions,
    default_model: Optional[str] = None,
    live_search_model: Optional[str] = None,
    default_region: Optional[str] = None,
) -> RecommendationRequest:
    """Models and region fall back to the configured settings when not given."""
    use_live_search = wants_live_search(options)
    if use_live_search:
        model = live_search_model or settings.OPENAI_LIVE_SEARCH_MODEL
    else:
        model = default_model or settings.OPENAI_MODEL
    return RecommendationRequest(
        prompt=build_prompt(options, default_region=default_region or settings.DEFAULT_REGION),
        use_live_search=use_live_search,
        model=model,
    )
