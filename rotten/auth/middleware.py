"""Bearer API key identity and moderator guard."""

import hashlib
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rotten.database import get_db
from rotten.models import Moderator, User


API_KEY_HEADER = APIKeyHeader(name="Authorization", auto_error=False)


def hash_api_key(api_key: str, salt: str) -> str:
    """Hash API key with salt for storage/lookup."""
    return hashlib.sha256(f"{salt}:{api_key}".encode()).hexdigest()


async def get_optional_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_header: str | None = Depends(API_KEY_HEADER),
) -> User | None:
    """Resolve the caller from a Bearer token; None when no usable token is sent."""
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    api_key = auth_header[7:].strip()
    if not api_key:
        return None
    api_key_hash = hash_api_key(api_key, request.app.state.settings.api_key_hash_salt)
    result = await db.execute(select(User).where(User.api_key_hash == api_key_hash))
    return result.scalar_one_or_none()


async def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="not_authenticated",
        )
    return user


async def is_moderator(db: AsyncSession, user_id: str) -> bool:
    result = await db.execute(select(Moderator).where(Moderator.user_id == user_id))
    return result.scalar_one_or_none() is not None


async def get_current_moderator(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    if not await is_moderator(db, user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="not_a_moderator",
        )
    return user


# Type aliases for dependency injection
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
UserDep = Annotated[User, Depends(get_current_user)]
ModeratorDep = Annotated[User, Depends(get_current_moderator)]
