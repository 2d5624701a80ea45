"""Notification worker endpoint - sends one queued email per call."""

import hmac
import logging

from fastapi import APIRouter, Header, HTTPException, status
from fastapi.responses import JSONResponse

from rotten.api.deps import DbDep, MailerDep, SettingsDep
from rotten.notifications.dispatch import process_next_job

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_worker_secret(expected: str | None, incoming: str | None) -> None:
    if not expected or not incoming or not hmac.compare_digest(expected, incoming):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")


@router.api_route("/send-notifications", methods=["GET", "POST"])
async def send_notifications(
    db: DbDep,
    mailer: MailerDep,
    settings: SettingsDep,
    x_worker_secret: str | None = Header(default=None),
):
    """Claim the oldest pending notification job and send it once."""
    _check_worker_secret(settings.notification_worker_secret, x_worker_secret)

    job, sent = await process_next_job(db, mailer)
    if job is None:
        return {"ok": True, "message": "no jobs"}
    if not sent:
        return JSONResponse(
            {"ok": False, "error": "send_failed", "job_id": job.id},
            status_code=500,
        )
    return {"ok": True, "job_id": job.id}
