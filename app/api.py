from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.config.settings import settings
from app.dependencies import get_client_identifier, get_metadata_client, get_recommender
from app.errors import MovieRecsError, UpstreamError
from app.omdb_client import LookupParams, MovieMetadataClient
from app.process.enrichment import enrich_recommendations
from app.process.recommendation import MovieRecommender
from app.schemas.api import (
    EnrichRequest,
    EnrichResponse,
    MovieLookupResponse,
    RecommendationList,
    RecommendationsRequest,
    RecommendationsResponse,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

POSTER_CACHE_CONTROL = "public, max-age=86400"


def _lookup_params(i: Optional[str], t: Optional[str], y: Optional[str]) -> LookupParams:
    return LookupParams(imdb_id=i or None, title=t or None, year=y or None)


@router.get("/health")
def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "ok", "service": settings.SERVICE_NAME}


@router.get("/")
def root():
    """Describe the available endpoints and how to query them."""
    return {
        "message": "Movie Recommendations API",
        "endpoints": {
            "recommendations": "/recommendations",
            "enrich": "/recommendations/enrich",
            "movie": "/movie-lookup",
            "poster": "/poster-lookup",
        },
        "examples": {
            "byImdbId": {
                "movie": "/movie-lookup?i=tt3896198",
                "poster": "/poster-lookup?i=tt3896198",
            },
            "byTitleAndYear": {
                "movie": "/movie-lookup?t=Guardians of the Galaxy Vol. 2&y=2017",
                "poster": "/poster-lookup?t=Guardians of the Galaxy Vol. 2&y=2017",
            },
        },
        "parameters": {
            "i": "IMDb ID (e.g., tt3896198)",
            "t": "Movie title",
            "y": "Release year",
        },
        "note": "Either provide imdb_id (i) OR both title (t) and year (y)",
    }


@router.post("/recommendations", response_model=RecommendationsResponse)
def recommendations(
    payload: RecommendationsRequest,
    client_id: str = Depends(get_client_identifier),
    recommender: MovieRecommender = Depends(get_recommender),
):
    """Recommend up to ten movies for the given search options."""
    try:
        result = recommender.get_recommendations(payload.search_options, client_id)
    except MovieRecsError:
        raise
    except Exception as e:
        logger.error("recommendations error: %s", repr(e), exc_info=True)
        raise UpstreamError("Failed to get recommendations") from e

    return RecommendationsResponse(
        response=RecommendationList(list=result.items),
        original_input=payload.search_options,
        remaining_requests=result.remaining_requests,
    )


@router.post("/recommendations/enrich", response_model=EnrichResponse)
async def enrich(
    payload: EnrichRequest,
    metadata_client: MovieMetadataClient = Depends(get_metadata_client),
):
    """Attach OMDb metadata to a recommendation batch, skipping titles that fail."""
    movies = await enrich_recommendations(payload.list, metadata_client.resolve_recommendation)
    return EnrichResponse(movies=movies)


@router.get("/movie-lookup", response_model=MovieLookupResponse)
def movie_lookup(
    i: Optional[str] = None,
    t: Optional[str] = None,
    y: Optional[str] = None,
    metadata_client: MovieMetadataClient = Depends(get_metadata_client),
):
    """Look up one movie by IMDb id, or by title and year."""
    try:
        result = metadata_client.lookup(_lookup_params(i, t, y))
    except MovieRecsError:
        raise
    except Exception as e:
        logger.error("movie_lookup error: %s", repr(e), exc_info=True)
        raise UpstreamError("Failed to fetch movie data") from e
    return MovieLookupResponse(data=result.metadata, source=result.source)


@router.get("/poster-lookup")
def poster_lookup(
    i: Optional[str] = None,
    t: Optional[str] = None,
    y: Optional[str] = None,
    metadata_client: MovieMetadataClient = Depends(get_metadata_client),
):
    """Proxy the poster image; posters never change for a title so they cache for a day."""
    try:
        poster = metadata_client.fetch_poster(_lookup_params(i, t, y))
    except MovieRecsError:
        raise
    except Exception as e:
        logger.error("poster_lookup error: %s", repr(e), exc_info=True)
        raise UpstreamError("Failed to fetch movie poster") from e
    return Response(
        content=poster.content,
        media_type=poster.content_type,
        headers={
            "Cache-Control": POSTER_CACHE_CONTROL,
            "Access-Control-Allow-Origin": "*",
        },
    )
