"""Pytest fixtures for publishing record validation tests.

Provides:
- a pinned reference instant (NOW) so date rules are deterministic
- validators wired to that clock
- one valid sample record per record kind

Usage:
    def test_valid_chapter(chapter_validator, valid_chapter):
        result = chapter_validator.validate_for_creation(valid_chapter)
        assert result.is_valid
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from config import Settings  # noqa: E402
from domain.publishing import (  # noqa: E402
    ChapterValidator,
    PublicationValidator,
    RightsValidator,
    SalesValidator,
)


NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)

PUBLICATION_ID = "3f1c2a4e-8b7d-4c2e-9a1f-5d6e7b8c9d0a"

CHAPTER_TEXT = (
    "The lamp at the end of the pier had burned every night for forty years. "
    "Mara climbed the stairs slowly, counting the steps the way her father had taught her.\n\n"
    "At the top she found the logbook open, its last entry written in a hand she did not know."
)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    return Settings(ENABLE_METRICS=False, SALES_BATCH_MAX_RECORDS=10_000, SALES_STALE_AFTER_DAYS=30)


@pytest.fixture
def chapter_validator(settings):
    return ChapterValidator(clock=lambda: NOW, settings=settings)


@pytest.fixture
def publication_validator(settings):
    return PublicationValidator(clock=lambda: NOW, settings=settings)


@pytest.fixture
def rights_validator(settings):
    return RightsValidator(clock=lambda: NOW, settings=settings)


@pytest.fixture
def sales_validator(settings):
    return SalesValidator(clock=lambda: NOW, settings=settings)


@pytest.fixture
def valid_chapter():
    return {
        "title": "The Lighthouse Keeper",
        "publication_id": PUBLICATION_ID,
        "content": CHAPTER_TEXT,
        "order_index": 1,
        "excerpt": "Mara climbs the lighthouse and finds a logbook she cannot explain.",
        "word_count": 62,
        "reading_time": 1,
        "keywords": ["lighthouse", "mystery"],
        "status": "draft",
    }


@pytest.fixture
def valid_publication():
    return {
        "title": "Northern Lights Over Harrow Bay",
        "publication_type": "ebook",
        "language": "en",
        "description": "A quiet coastal town, a lighthouse that should have gone dark, and a keeper's daughter.",
        "genre": "mystery",
        "target_audience": "adult",
        "isbn_13": "978-0-306-40615-7",
        "isbn_10": "0-306-40615-2",
        "pricing": {"USD": {"retail_price": 9.99, "wholesale_price": 4.99}},
        "territories": ["US", "GB"],
        "keywords": ["lighthouse", "coastal mystery"],
        "bisac_categories": ["FIC022000"],
        "chapters": [{"title": "The Lighthouse Keeper"}],
        "word_count": 85_000,
        "status": "draft",
    }


@pytest.fixture
def valid_rights():
    return {
        "publication_id": PUBLICATION_ID,
        "right_type": "ebook",
        "territory": "US",
        "language": "en",
        "license_type": "exclusive",
        "exclusive": True,
        "sublicensing_allowed": False,
        "start_date": "2024-07-01",
        "end_date": "2029-07-01",
        "royalty_rate": 0.25,
        "advance_amount": 5000,
        "minimum_guarantee": 1000,
        "currency": "USD",
    }


@pytest.fixture
def valid_sale():
    return {
        "publication_id": PUBLICATION_ID,
        "store": "amazon",
        "sale_date": "2024-06-10",
        "quantity": 3,
        "unit_price": 4.99,
        "currency": "USD",
        "gross_revenue": 14.97,
        "net_revenue": 10.48,
        "royalty_amount": 7.34,
        "unit": "units",
        "sale_type": "sale",
    }
