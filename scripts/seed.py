#!/usr/bin/env python3
"""
Seed script: creates a demo submitter, a demo moderator, a few companies and
some approved evidence, then recomputes scores.
Run after migrations: python scripts/seed.py
"""

import asyncio
from uuid import uuid4

from sqlalchemy import select

from rotten.auth.middleware import hash_api_key
from rotten.config import settings
from rotten.database import build_engine, build_session_maker
from rotten.models import Company, Evidence, Moderator, User
from rotten.storage.repositories import create_evidence, record_action
from rotten.storage.scores import trigger_score_recompute
from rotten.utils.slug import slugify

SUBMITTER_KEY = "rk_demo_submitter_12345"
MODERATOR_KEY = "rk_demo_moderator_12345"

COMPANIES = [
    {"name": "Acme Corp", "country": "US", "industry": "Manufacturing", "employees": 12000,
     "ownership_type": "public_company", "country_region": "global"},
    {"name": "Acme Logistics", "country": "DE", "industry": "Logistics", "employees": 800,
     "ownership_type": "private_equity_owned", "country_region": "western"},
    {"name": "Globex", "country": "US", "industry": "Energy", "employees": 45,
     "ownership_type": "family_owned", "country_region": "western"},
]

EVIDENCE = [
    ("Acme Corp", "Mandatory unpaid overtime", "wage_abuse", 70),
    ("Acme Corp", "River discharge fines", "pollution_environmental_damage", 85),
    ("Acme Logistics", "Warehouse heat incidents", "toxic_workplace", 60),
    ("Globex", "Misleading net-zero ads", "greenwashing", 40),
]


async def _get_or_create_user(session, email: str, api_key: str) -> User:
    key_hash = hash_api_key(api_key, settings.api_key_hash_salt)
    result = await session.execute(select(User).where(User.api_key_hash == key_hash))
    user = result.scalar_one_or_none()
    if user:
        print(f"User {email} already exists, using existing.")
        return user
    user = User(id=str(uuid4()), email=email, api_key_hash=key_hash)
    session.add(user)
    await session.flush()
    return user


async def seed():
    engine = build_engine(settings)
    session_maker = build_session_maker(engine)

    async with session_maker() as session:
        submitter = await _get_or_create_user(session, "submitter@example.com", SUBMITTER_KEY)
        moderator = await _get_or_create_user(session, "moderator@example.com", MODERATOR_KEY)
        if await session.get(Moderator, moderator.id) is None:
            session.add(Moderator(user_id=moderator.id))

        companies = {}
        for data in COMPANIES:
            slug = slugify(data["name"])
            result = await session.execute(select(Company).where(Company.slug == slug))
            company = result.scalar_one_or_none()
            if company is None:
                company = Company(slug=slug, **data)
                session.add(company)
                await session.flush()
            companies[data["name"]] = company

        existing = await session.execute(select(Evidence.id).limit(1))
        if existing.scalar_one_or_none() is None:
            for company_name, title, category, severity in EVIDENCE:
                ev = await create_evidence(
                    session,
                    title=title,
                    category=category,
                    severity=severity,
                    entity_type="company",
                    entity_id=companies[company_name].id,
                    user_id=submitter.id,
                )
                ev.status = "approved"
                await record_action(
                    session, "approve", moderator.id, "evidence", ev.id,
                    note="seeded", source="seed",
                )
        else:
            print("Evidence already present, skipping.")

        await session.commit()
        result = await trigger_score_recompute(session)

    await engine.dispose()

    print("Seed complete.")
    print(f"  Submitter API key: {SUBMITTER_KEY}")
    print(f"  Moderator API key: {MODERATOR_KEY}")
    print(f"  Scores recomputed: {result.success} ({result.entities_processed} entities)")


if __name__ == "__main__":
    asyncio.run(seed())
