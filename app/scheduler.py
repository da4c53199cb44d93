from apscheduler.schedulers.background import BackgroundScheduler

from app.utils.logger import get_logger
from app.utils.rate_limiter import ServerRateLimiter

logger = get_logger(__name__)


def sweep_rate_limits(limiter: ServerRateLimiter):
    """Remove expired rate-limit windows. Errors are logged so the job keeps its schedule."""
    try:
        removed = limiter.cleanup()
        logger.debug("Rate limit sweep finished (removed=%s, tracked=%s)", removed, len(limiter))
    except Exception as e:
        logger.error("Rate limit sweep failed: %s", repr(e), exc_info=True)


def start_cleanup_scheduler(limiter: ServerRateLimiter, interval_seconds: int) -> BackgroundScheduler:
    """Start a background scheduler that sweeps the limiter every `interval_seconds`."""
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        sweep_rate_limits,
        "interval",
        seconds=interval_seconds,
        args=[limiter],
        id="rate_limit_cleanup_job",
        replace_existing=True
    )
    scheduler.start()
    logger.info("Started rate limit cleanup scheduler (every %s seconds)", interval_seconds)
    return scheduler
