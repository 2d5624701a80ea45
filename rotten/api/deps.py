"""Shared route dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rotten.config import Settings
from rotten.database import get_db
from rotten.notifications.dispatch import NotificationDispatcher
from rotten.notifications.mailer import Mailer, get_mailer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_dispatcher(
    db: Annotated[AsyncSession, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> NotificationDispatcher:
    return NotificationDispatcher(db, mailer, mode=settings.notification_mode)


# Integer primary keys are 32-bit signed columns
MIN_ID = -(2**31)
MAX_ID = 2**31 - 1


def _invalid_id() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid_id")


def parse_int_id(raw: str | int | None) -> int:
    """Integer id from a path/query/body value. Non-integers and out-of-range values are a 400."""
    if isinstance(raw, bool):
        raise _invalid_id()
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError):
            raise _invalid_id() from None
    if not MIN_ID <= value <= MAX_ID:
        raise _invalid_id()
    return value


DbDep = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]
DispatcherDep = Annotated[NotificationDispatcher, Depends(get_dispatcher)]
