"""
APScheduler Configuration

Runs the periodic integrity audit.
"""
import logging
import os
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from registrar.services.integrity_auditor import IntegrityAuditor

logger = logging.getLogger(__name__)

AUDIT_INTERVAL_MINUTES = int(os.getenv("REGISTRAR_AUDIT_INTERVAL_MINUTES", "60"))

# Global scheduler instance
scheduler = AsyncIOScheduler()


async def audit_integrity(auditor: IntegrityAuditor):
    """
    Periodic job that audits every table for invariant violations.

    Logs a summary; per-rule alerts are logged by the auditor itself.
    """
    logger.info("Starting scheduled integrity audit")

    try:
        summary = await auditor.audit_all()
    except Exception as e:
        logger.error(f"Failed to run integrity audit: {e}", exc_info=True)
        return

    if summary["consistent"]:
        logger.info(f"Integrity audit complete: {summary['tables_audited']} tables consistent")
    else:
        logger.warning(
            f"Integrity audit found issues in {summary['tables_with_issues']} "
            f"of {summary['tables_audited']} tables"
        )


def configure_scheduler(auditor: IntegrityAuditor, interval_minutes: Optional[int] = None) -> bool:
    """
    Register the integrity audit job.

    Args:
        auditor: Auditor the job runs
        interval_minutes: Minutes between runs (defaults to AUDIT_INTERVAL_MINUTES, 0 disables)

    Returns:
        bool: True if a job was scheduled
    """
    interval = AUDIT_INTERVAL_MINUTES if interval_minutes is None else interval_minutes
    if interval <= 0:
        logger.info("Integrity audit job disabled")
        return False

    scheduler.add_job(
        audit_integrity,
        trigger=IntervalTrigger(minutes=interval),
        args=[auditor],
        id='integrity_audit',
        name='Audit Registrar Integrity',
        replace_existing=True,
        coalesce=True,  # Combine missed runs into single execution
        max_instances=1  # Only one instance at a time
    )

    logger.info(f"Scheduler configured with integrity audit every {interval} minutes")
    return True


def start_scheduler(auditor: IntegrityAuditor, interval_minutes: Optional[int] = None):
    """Start the APScheduler"""
    if configure_scheduler(auditor, interval_minutes):
        scheduler.start()
        logger.info("Scheduler started")


def stop_scheduler():
    """Stop the APScheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
