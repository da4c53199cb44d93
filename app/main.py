from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api import router
from app.config.settings import settings
from app.dependencies import build_metadata_client
from app.errors import MovieRecsError
from app.process.recommendation import MovieRecommender
from app.scheduler import start_cleanup_scheduler
from app.utils.logger import get_logger
from app.utils.rate_limiter import ServerRateLimiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler: build the per-process limiter, recommender and metadata cache into app.state."""
    limiter = ServerRateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    app.state.rate_limiter = limiter  # type: ignore[attr-defined]
    app.state.recommender = MovieRecommender(limiter=limiter)  # type: ignore[attr-defined]
    app.state.metadata_client = build_metadata_client()  # type: ignore[attr-defined]
    scheduler = start_cleanup_scheduler(limiter, settings.RATE_LIMIT_CLEANUP_INTERVAL_SECONDS)
    try:
        yield
    finally:
        scheduler.shutdown(wait=False)
        logger.info("Rate limit cleanup scheduler stopped")


app = FastAPI(title="Movie Recommendations", lifespan=lifespan)
app.include_router(router)


@app.exception_handler(MovieRecsError)
async def movie_recs_error_handler(request: Request, exc: MovieRecsError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request body",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry exception objects that JSONResponse cannot encode
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
