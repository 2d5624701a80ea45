"""Notification dispatch - outbox rows plus the single-job worker step."""

import logging
import smtplib
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rotten.database import utcnow
from rotten.models import NotificationJob
from rotten.notifications.mailer import Mailer

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 2000


def _mark_sent(job: NotificationJob) -> None:
    job.status = "sent"
    job.attempts += 1
    job.last_error = None
    job.updated_at = utcnow()


def _mark_failed(job: NotificationJob, err: Exception) -> None:
    job.status = "failed"
    job.attempts += 1
    job.last_error = str(err)[:MAX_ERROR_LENGTH]
    job.updated_at = utcnow()


async def send_job(db: AsyncSession, mailer: Mailer, job: NotificationJob) -> bool:
    """
    Send one job exactly once and record the outcome. No retries.
    A header the mailer refuses to encode (ValueError) counts as a failed send.
    """
    try:
        await mailer.send(job.recipient_email, job.subject, job.body)
    except (smtplib.SMTPException, OSError, ValueError) as e:
        logger.error("notification job %s to %s failed: %s", job.id, job.recipient_email, e)
        _mark_failed(job, e)
        await db.flush()
        return False
    _mark_sent(job)
    await db.flush()
    logger.info("notification job %s sent to %s", job.id, job.recipient_email)
    return True


class NotificationDispatcher:
    """
    Stores notification jobs, and in "direct" mode sends them inline.

    A failed inline send leaves the job in "failed" with last_error set; the
    caller sees it on the returned job and decides what to do.
    """

    def __init__(self, db: AsyncSession, mailer: Mailer | None = None, mode: str = "queue"):
        self.db = db
        self.mailer = mailer
        self.mode = mode

    async def notify(
        self,
        recipient: str | None,
        subject: str,
        body: str,
        metadata: dict[str, Any] | None = None,
    ) -> NotificationJob | None:
        if not recipient:
            return None

        job = NotificationJob(
            recipient_email=recipient,
            subject=subject,
            body=body,
            job_metadata=metadata or {},
            status="pending",
            attempts=0,
            created_at=utcnow(),
        )
        self.db.add(job)
        await self.db.flush()

        if self.mode == "direct" and self.mailer is not None:
            await send_job(self.db, self.mailer, job)
        return job


async def claim_next_job(db: AsyncSession) -> NotificationJob | None:
    """Oldest pending job; locked with SKIP LOCKED where the database supports it."""
    result = await db.execute(
        select(NotificationJob)
        .where(NotificationJob.status == "pending")
        .order_by(NotificationJob.created_at.asc(), NotificationJob.id.asc())
        .limit(1)
        .with_for_update(skip_locked=True)
    )
    return result.scalar_one_or_none()


async def process_next_job(db: AsyncSession, mailer: Mailer) -> tuple[NotificationJob | None, bool]:
    """Claim and send one pending job. Returns (job, sent)."""
    job = await claim_next_job(db)
    if job is None:
        return None, False
    sent = await send_job(db, mailer, job)
    return job, sent
