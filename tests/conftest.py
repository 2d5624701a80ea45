"""Shared fixtures: in-memory SQLite app, fake mailer, row seeders."""

from datetime import datetime
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from rotten.auth.middleware import hash_api_key
from rotten.config import Settings
from rotten.database import Base, build_session_maker, utcnow
from rotten.main import create_app
from rotten.models import (
    Company,
    CompanyRequest,
    Evidence,
    ModerationAction,
    Moderator,
    NotificationJob,
    User,
)

SALT = "test_salt"
WORKER_SECRET = "worker-secret"


class FakeMailer:
    """Records sends instead of talking SMTP. Set fail_with to make send() raise."""

    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []
        self.fail_with: Exception | None = None

    async def send(self, recipient: str, subject: str, body: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((recipient, subject, body))


class Seeder:
    """Writes rows through short-lived sessions so the app always sees committed data."""

    def __init__(self, session_maker):
        self.session_maker = session_maker

    async def _add(self, obj):
        async with self.session_maker() as session:
            session.add(obj)
            await session.commit()
        return obj

    async def user(self, email: str | None = None, moderator: bool = False) -> tuple[User, dict]:
        api_key = f"rk_{uuid4().hex}"
        user = User(
            id=str(uuid4()),
            email=email if email is not None else f"{uuid4().hex[:8]}@example.com",
            api_key_hash=hash_api_key(api_key, SALT),
        )
        await self._add(user)
        if moderator:
            await self._add(Moderator(user_id=user.id))
        return user, {"Authorization": f"Bearer {api_key}"}

    async def company(self, name: str = "Acme Corp", slug: str | None = None, **fields) -> Company:
        return await self._add(
            Company(name=name, slug=slug or name.lower().replace(" ", "-"), **fields)
        )

    async def evidence(
        self,
        entity_id: int,
        user_id: str | None = None,
        status: str = "pending",
        category: str = "wage_abuse",
        severity: int = 50,
        entity_type: str = "company",
        title: str = "Unpaid overtime",
        assigned_moderator_id: str | None = None,
        assigned_at: datetime | None = None,
        created_at: datetime | None = None,
    ) -> Evidence:
        return await self._add(
            Evidence(
                title=title,
                category=category,
                severity=severity,
                entity_type=entity_type,
                entity_id=entity_id,
                user_id=user_id,
                status=status,
                assigned_moderator_id=assigned_moderator_id,
                assigned_at=assigned_at,
                created_at=created_at or utcnow(),
            )
        )

    async def company_request(
        self,
        name: str = "Initech",
        user_id: str | None = None,
        status: str = "pending",
        assigned_moderator_id: str | None = None,
        assigned_at: datetime | None = None,
        created_at: datetime | None = None,
    ) -> CompanyRequest:
        return await self._add(
            CompanyRequest(
                name=name,
                user_id=user_id,
                status=status,
                assigned_moderator_id=assigned_moderator_id,
                assigned_at=assigned_at,
                created_at=created_at or utcnow(),
            )
        )

    async def action(self, action: str, moderator_id: str, target_type: str, target_id) -> None:
        await self._add(
            ModerationAction(
                action=action,
                moderator_id=moderator_id,
                target_type=target_type,
                target_id=str(target_id),
            )
        )

    async def get(self, model, pk):
        async with self.session_maker() as session:
            return await session.get(model, pk)

    async def jobs(self) -> list[NotificationJob]:
        async with self.session_maker() as session:
            result = await session.execute(select(NotificationJob).order_by(NotificationJob.id))
            return list(result.scalars().all())

    async def actions_for(self, target_type: str, target_id) -> list[ModerationAction]:
        async with self.session_maker() as session:
            result = await session.execute(
                select(ModerationAction)
                .where(
                    ModerationAction.target_type == target_type,
                    ModerationAction.target_id == str(target_id),
                )
                .order_by(ModerationAction.id)
            )
            return list(result.scalars().all())


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        api_key_hash_salt=SALT,
        notification_worker_secret=WORKER_SECRET,
        notification_mode="queue",
    )


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return build_session_maker(engine)


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def app(settings, session_maker, mailer):
    app = create_app(settings)
    app.state.session_maker = session_maker
    app.state.mailer = mailer
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def seed(session_maker):
    return Seeder(session_maker)
