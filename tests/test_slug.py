"""Unit tests for slug helpers."""

from rotten.utils.slug import MAX_SLUG_LENGTH, slug_candidates, slugify


def test_slugify():
    assert slugify("  Acme Corp  ") == "acme-corp"
    assert slugify("McDonald's, Inc.") == "mcdonalds-inc"
    assert slugify("--Foo__Bar--") == "foo-bar"


def test_slugify_truncates():
    assert len(slugify("x" * 200)) == MAX_SLUG_LENGTH


def test_slug_candidates():
    candidates = list(slug_candidates("Initech", fallback="company-1"))
    assert candidates[0] == "initech"
    assert candidates[1] == "initech-2"
    assert candidates[-1] == "initech-10"
    assert len(candidates) == 10


def test_slug_candidates_fallback():
    assert next(slug_candidates("!!!", fallback="company-7")) == "company-7"
