"""
Background scheduler for periodic tasks.

This module manages background jobs that run on a schedule:
- Reap security tokens that are used or expired: every TOKEN_CLEANUP_INTERVAL_HOURS
"""

import logging
from datetime import date
from typing import Optional
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import or_
from sqlalchemy.orm import Session
from myhome.core.config import settings
from myhome.core.database import SessionLocal
from myhome.models.security_token import SecurityToken

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def delete_stale_tokens(db: Session, today: Optional[date] = None) -> int:
    """
    Delete tokens that can never be accepted again.

    A token is stale once it is used or its expiry date is today or earlier
    (the confirm phase only accepts expiry dates strictly after today).
    Returns the number of deleted rows.
    """
    if today is None:
        today = date.today()
    deleted = (
        db.query(SecurityToken)
        .filter(or_(SecurityToken.is_used == True, SecurityToken.expiry_date <= today))  # noqa: E712
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def cleanup_stale_tokens_job():
    """
    Background job wrapping delete_stale_tokens in its own session.

    Errors are logged and rolled back so the scheduler keeps running.
    """
    db = SessionLocal()
    try:
        deleted = delete_stale_tokens(db)
        if deleted > 0:
            logger.info(f"Token cleanup job completed: Deleted {deleted} stale tokens")
        else:
            logger.info("Token cleanup job completed: No stale tokens found")
    except Exception as e:
        logger.error(f"Error in cleanup_stale_tokens_job: {str(e)}")
        db.rollback()
    finally:
        db.close()


def start_scheduler():
    """
    Start the background scheduler.

    This should be called when the FastAPI app starts.
    """
    if settings.TOKEN_CLEANUP_INTERVAL_HOURS <= 0:
        logger.info("Token cleanup disabled, background scheduler not started.")
        return
    if not scheduler.running:
        scheduler.add_job(
            cleanup_stale_tokens_job,
            trigger=IntervalTrigger(hours=settings.TOKEN_CLEANUP_INTERVAL_HOURS),
            id="cleanup_stale_tokens",
            name="Cleanup stale security tokens",
            replace_existing=True
        )

        scheduler.start()
        logger.info(
            f"Background scheduler started. Token cleanup scheduled every "
            f"{settings.TOKEN_CLEANUP_INTERVAL_HOURS} hours."
        )


def stop_scheduler():
    """
    Stop the background scheduler.

    This should be called when the FastAPI app shuts down.
    """
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Background scheduler stopped.")
