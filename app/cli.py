"""Command line front end for the recommendations API.

Usage:
  python -m app.cli --description "a feel-good heist movie" --genre Comedy --category "New Release"
  python -m app.cli --reset

Local usage is kept in a JSON state file so the client-side limit holds across runs.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Optional

from app.client.api_client import RecommendationsApiClient
from app.client.rate_limiter import ClientRateLimiter, JsonFileStorage
from app.config.settings import settings
from app.errors import MovieRecsError
from app.schemas.api import SearchOptions
from app.schemas.movies import MovieMetadata
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_STATE_FILE = "~/.movie_recs/state.json"


def format_movie(movie: MovieMetadata) -> str:
    line = f"{movie.title} ({movie.year or '?'})"
    if movie.imdb_rating is not None:
        line += f"  IMDb {movie.imdb_rating}"
    if movie.genre:
        line += f"  [{', '.join(movie.genre)}]"
    if movie.plot:
        line += f"\n    {movie.plot}"
    return line


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Get movie recommendations")
    parser.add_argument("--description", type=str, default="", help="What you feel like watching")
    parser.add_argument("--genre", action="append", default=[], help="Genre tag (repeatable)")
    parser.add_argument("--category", action="append", default=[], help="Category tag (repeatable)")
    parser.add_argument("--region", type=str, default=settings.DEFAULT_REGION, help="Where you are watching from")
    parser.add_argument(
        "--api-url",
        type=str,
        default=os.getenv("API_BASE_URL", "http://localhost:8080"),
        help="Base URL of the recommendations API",
    )
    parser.add_argument("--state-file", type=str, default=DEFAULT_STATE_FILE, help="Where local usage is kept")
    parser.add_argument("--reset", action="store_true", help="Clear local usage and exit")
    args = parser.parse_args(argv)

    limiter = ClientRateLimiter(
        storage=JsonFileStorage(args.state_file),
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    client = RecommendationsApiClient(args.api_url, limiter=limiter)

    if args.reset:
        client.reset()
        print(f"Usage cleared. Requests remaining: {client.remaining_requests}")
        return 0

    options = SearchOptions(
        description=args.description,
        genres=args.genre,
        categories=args.category,
        region=args.region,
    )
    try:
        result = client.get_recommendations(options)
        if not result.response.list:
            print("No movie recommendations received. Please try again.")
            return 1
        movies = client.enrich(result.response.list)
    except MovieRecsError as e:
        logger.error("Recommendation request failed: %s", e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    for movie in movies:
        print(format_movie(movie))
    print(f"\nAPI requests remaining: {limiter.get_remaining_requests()} (used: {limiter.get_current_count()})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
