"""URL-safe slugs."""

import re

MAX_SLUG_LENGTH = 80


def slugify(value: str) -> str:
    """Lowercase, strip quotes, collapse everything else non-alphanumeric to single dashes."""
    slug = value.lower().strip()
    slug = re.sub(r"['\"]", "", slug)
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    return slug.strip("-")[:MAX_SLUG_LENGTH]


def slug_candidates(name: str, fallback: str, attempts: int = 10):
    """Base slug, then base-2, base-3, ... for uniqueness probing."""
    base = slugify(name) or fallback
    yield base
    for i in range(2, attempts + 1):
        yield f"{base}-{i}"
