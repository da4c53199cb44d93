"""HTTP client for the recommendations API, with the local rate limit in front."""

import asyncio
from typing import Any, Dict, List, Optional

import requests

from app.client.rate_limiter import ClientRateLimiter
from app.errors import RateLimitError, UpstreamError, ValidationError, error_for_status
from app.omdb_client import LookupParams, MetadataCache
from app.process.enrichment import enrich_recommendations
from app.schemas.api import NO_PREFERENCES_ERROR, RecommendationItem, RecommendationsResponse, SearchOptions
from app.schemas.movies import MovieMetadata
from app.utils.logger import get_logger

logger = get_logger(__name__)


class RecommendationsApiClient:
    def __init__(
        self,
        base_url: str,
        limiter: Optional[ClientRateLimiter] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 60,
        cache: Optional[MetadataCache] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.limiter = limiter
        self.session = session or requests.Session()
        self.timeout = timeout
        self.cache = cache if cache is not None else MetadataCache()

    def _request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("Request to %s failed: %s", url, repr(e))
            raise UpstreamError("Could not reach the recommendations service") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok:
            message = body.get("error") if isinstance(body, dict) else None
            raise error_for_status(response.status_code, message or f"API call failed ({response.status_code})")
        return body

    def get_recommendations(self, options: SearchOptions) -> RecommendationsResponse:
        """Submit a search. The local limit is checked (and a slot used) before sending."""
        if not options.has_content():
            raise ValidationError(NO_PREFERENCES_ERROR)

        if self.limiter is not None and not self.limiter.check_limit():
            raise RateLimitError("Rate limit exceeded. Please try again later.")

        body = self._request(
            "POST",
            "/recommendations",
            json={"searchOptions": options.model_dump(by_alias=True)},
        )
        result = RecommendationsResponse.model_validate(body)
        logger.info("Received %s recommendations", len(result.response.list))
        return result

    def lookup_movie(self, item: RecommendationItem) -> MovieMetadata:
        params = LookupParams.from_recommendation(item)
        key = params.cache_key
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if params.imdb_id:
            query = {"i": params.imdb_id}
        else:
            query = {"t": params.title, "y": str(params.year)}
        body = self._request("GET", "/movie-lookup", params=query)
        if not body.get("success") or not body.get("data"):
            raise UpstreamError(body.get("error") or "Failed to fetch movie data")

        metadata = MovieMetadata.model_validate(body["data"])
        self.cache.set(key, metadata)
        return metadata

    def enrich(self, items: List[RecommendationItem]) -> List[MovieMetadata]:
        return asyncio.run(enrich_recommendations(items, self.lookup_movie))

    def reset(self) -> None:
        """Clear local usage, as when returning to the search screen."""
        if self.limiter is not None:
            self.limiter.reset()

    @property
    def remaining_requests(self) -> Optional[int]:
        return self.limiter.get_remaining_requests() if self.limiter is not None else None
