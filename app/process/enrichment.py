"""Fan out metadata lookups for a recommendation batch and keep what resolves."""

import asyncio
import inspect
from typing import Awaitable, Callable, List, Sequence, Union

from app.errors import EnrichmentError, MovieRecsError
from app.schemas.api import RecommendationItem
from app.schemas.movies import MovieMetadata
from app.utils.logger import get_logger

logger = get_logger(__name__)

Resolver = Callable[[RecommendationItem], Union[MovieMetadata, Awaitable[MovieMetadata]]]

ENRICHMENT_FAILED_ERROR = "No movies could be enriched. Please try again."


def _schedule(resolve: Resolver, item: RecommendationItem) -> Awaitable[MovieMetadata]:
    # blocking resolvers (requests based) run in worker threads
    if inspect.iscoroutinefunction(resolve):
        return resolve(item)
    return asyncio.to_thread(resolve, item)


async def enrich_recommendations(
    items: Sequence[RecommendationItem], resolve: Resolver
) -> List[MovieMetadata]:
    """Resolve every item concurrently and return the successes in input order.

    Individual failures are logged and dropped. Raises EnrichmentError when the
    batch is non-empty and nothing resolved.
    """
    if not items:
        return []

    results = await asyncio.gather(
        *(_schedule(resolve, item) for item in items), return_exceptions=True
    )

    movies: List[MovieMetadata] = []
    for item, result in zip(items, results):
        if isinstance(result, MovieRecsError):
            logger.warning("Dropping %s (%s): %s", item.title, item.year, result.message)
        elif isinstance(result, BaseException):
            logger.warning("Dropping %s (%s): %s", item.title, item.year, repr(result), exc_info=result)
        else:
            movies.append(result)

    if not movies:
        logger.error("Enrichment failed for all %s recommendations", len(items))
        raise EnrichmentError(ENRICHMENT_FAILED_ERROR)

    logger.info("Enriched %s of %s recommendations", len(movies), len(items))
    return movies
