import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.jobstores.memory import MemoryJobStore

from app.services.password_reset_store import PasswordResetStore
from app.services.token_blacklist import TokenBlacklist

logger = logging.getLogger(__name__)

CLEANUP_JOB_ID = "token_cleanup"


def cleanup_expired_tokens(
    token_blacklist: TokenBlacklist,
    password_resets: PasswordResetStore,
) -> None:
    """Sweep both token stores. A failing sweep does not stop the other."""
    try:
        removed = token_blacklist.sweep()
        logger.debug(f"Removed {removed} expired blacklisted tokens")
    except Exception as e:
        logger.error(f"Error cleaning up blacklisted tokens: {e}", exc_info=True)

    try:
        removed = password_resets.sweep()
        logger.debug(f"Removed {removed} expired password reset tokens")
    except Exception as e:
        logger.error(f"Error cleaning up password reset tokens: {e}", exc_info=True)


def start_scheduler(
    token_blacklist: TokenBlacklist,
    password_resets: PasswordResetStore,
    interval_ms: int,
) -> BackgroundScheduler:
    """Start a scheduler that sweeps the token stores every interval_ms."""
    scheduler = BackgroundScheduler(
        jobstores={"default": MemoryJobStore()},
        job_defaults={"coalesce": True, "max_instances": 1},
    )
    scheduler.add_job(
        cleanup_expired_tokens,
        "interval",
        seconds=interval_ms / 1000,
        id=CLEANUP_JOB_ID,
        args=[token_blacklist, password_resets],
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"APScheduler started; token cleanup every {interval_ms} ms")
    return scheduler


def shutdown_scheduler(scheduler: BackgroundScheduler) -> None:
    """Gracefully shut down the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("APScheduler shut down")
