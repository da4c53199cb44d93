"""FastAPI dependencies handing process-wide state to the request handlers.

The limiter and the metadata client are built once in the app lifespan and kept
on `app.state`; tests can swap them via `app.dependency_overrides`.
"""

from fastapi import Request

from app.config.settings import settings
from app.errors import ConfigError
from app.omdb_client import MovieMetadataClient
from app.process.recommendation import MovieRecommender
from app.utils.logger import get_logger
from app.utils.rate_limiter import ServerRateLimiter

logger = get_logger(__name__)


def get_client_identifier(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_rate_limiter(request: Request) -> ServerRateLimiter:
    return request.app.state.rate_limiter


def get_recommender(request: Request) -> MovieRecommender:
    return request.app.state.recommender


def get_metadata_client(request: Request) -> MovieMetadataClient:
    client = getattr(request.app.state, "metadata_client", None)
    if client is None:
        logger.error("OMDb API key not configured")
        raise ConfigError("OMDb API key not configured")
    return client


def build_metadata_client() -> MovieMetadataClient | None:
    """Build the shared OMDb client, or None when the key is missing."""
    if not settings.omdb_configured:
        logger.warning("OMDB_API_KEY not set; movie lookups will fail with a config error")
        return None
    return MovieMetadataClient(
        api_key=settings.OMDB_API_KEY,
        base_url=settings.OMDB_API_URL,
        poster_url=settings.OMDB_POSTER_API_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
