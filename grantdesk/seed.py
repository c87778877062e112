"""
Reference data inserted on first start: the supported countries and a set
of sample grants. Each table is only seeded while it is empty.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from grantdesk.db import CountryRecord, DbClient, GrantRecord
from grantdesk.types import AmountType, GrantCategory, GrantStatus

logger = logging.getLogger(__name__)


def _date(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


DEFAULT_COUNTRIES = [
    CountryRecord("usa", "United States", "USA", "USD", "\U0001F1FA\U0001F1F8"),
    CountryRecord("uk", "United Kingdom", "GBR", "GBP", "\U0001F1EC\U0001F1E7"),
    CountryRecord("canada", "Canada", "CAN", "CAD", "\U0001F1E8\U0001F1E6"),
    CountryRecord("australia", "Australia", "AUS", "AUD", "\U0001F1E6\U0001F1FA"),
    CountryRecord("newzealand", "New Zealand", "NZL", "NZD", "\U0001F1F3\U0001F1FF"),
    CountryRecord("germany", "Germany", "DEU", "EUR", "\U0001F1E9\U0001F1EA"),
    CountryRecord("france", "France", "FRA", "EUR", "\U0001F1EB\U0001F1F7"),
    CountryRecord("japan", "Japan", "JPN", "JPY", "\U0001F1EF\U0001F1F5"),
    CountryRecord("southkorea", "South Korea", "KOR", "KRW", "\U0001F1F0\U0001F1F7"),
    CountryRecord("singapore", "Singapore", "SGP", "SGD", "\U0001F1F8\U0001F1EC"),
    CountryRecord("uae", "United Arab Emirates", "ARE", "AED", "\U0001F1E6\U0001F1EA"),
    CountryRecord("netherlands", "Netherlands", "NLD", "EUR", "\U0001F1F3\U0001F1F1"),
    CountryRecord("sweden", "Sweden", "SWE", "SEK", "\U0001F1F8\U0001F1EA"),
    CountryRecord("norway", "Norway", "NOR", "NOK", "\U0001F1F3\U0001F1F4"),
]


# Keyword arguments for GrantRecord; ids and timestamps are assigned per insert.
SAMPLE_GRANTS = [
    dict(
        title="Senior Citizens Support Grant",
        description=(
            "Comprehensive support for seniors covering healthcare, housing "
            "modifications, and daily living assistance."
        ),
        category=GrantCategory.SENIORS,
        country_id="usa",
        min_amount=Decimal("15000"),
        max_amount=Decimal("35000"),
        currency="USD",
        total_spots=750,
        available_spots=750,
        deadline=_date(2025, 6, 30),
        eligibility_criteria="Age 65 or older with demonstrated need for assistance",
        application_instructions=(
            "Submit age verification, medical records, and needs assessment"
        ),
    ),
    dict(
        title="Emergency Financial Relief Grant",
        description=(
            "Immediate financial assistance for individuals and families facing "
            "unexpected hardships."
        ),
        category=GrantCategory.EMERGENCY,
        country_id="uk",
        min_amount=Decimal("5000"),
        max_amount=Decimal("35000"),
        currency="GBP",
        total_spots=9999,
        available_spots=9999,
        deadline=None,
        eligibility_criteria=(
            "Demonstrated financial hardship due to unexpected circumstances"
        ),
        application_instructions="Submit hardship documentation and proof of expenses",
    ),
    dict(
        title="First Home Buyer Assistance Grant",
        description=(
            "Supporting first-time home buyers with down payment assistance and "
            "closing cost relief."
        ),
        category=GrantCategory.HOMEBUYER,
        country_id="australia",
        min_amount=Decimal("20000"),
        max_amount=Decimal("60000"),
        currency="AUD",
        total_spots=1000,
        available_spots=1000,
        deadline=_date(2025, 3, 31),
        eligibility_criteria=(
            "First-time home buyers with household income under $150,000"
        ),
        application_instructions=(
            "Submit income verification, pre-approval letter, and property details"
        ),
    ),
    dict(
        title="Healthcare Innovation Research Grant",
        description=(
            "Funding breakthrough medical research and healthcare technology "
            "development initiatives."
        ),
        category=GrantCategory.RESEARCH,
        country_id="canada",
        min_amount=Decimal("50000"),
        max_amount=Decimal("200000"),
        currency="CAD",
        total_spots=150,
        available_spots=150,
        deadline=_date(2025, 2, 28),
        eligibility_criteria=(
            "Healthcare professionals or researchers with institutional affiliation"
        ),
        application_instructions=(
            "Submit research proposal, ethics approval, and team credentials"
        ),
    ),
    dict(
        title="Small Business Innovation Grant",
        description=(
            "Empowering entrepreneurs and small business owners to scale their "
            "operations and create jobs."
        ),
        category=GrantCategory.BUSINESS,
        country_id="germany",
        min_amount=Decimal("10000"),
        max_amount=Decimal("50000"),
        currency="EUR",
        total_spots=200,
        available_spots=200,
        deadline=_date(2025, 1, 15),
        eligibility_criteria="Small business with less than 50 employees",
        application_instructions=(
            "Submit business plan, financial statements, and growth projections"
        ),
    ),
    dict(
        title="Higher Education Excellence Grant",
        description=(
            "Supporting outstanding students pursuing advanced degrees in STEM "
            "fields across universities."
        ),
        category=GrantCategory.EDUCATION,
        country_id="france",
        min_amount=Decimal("25000"),
        max_amount=Decimal("100000"),
        currency="EUR",
        total_spots=500,
        available_spots=500,
        deadline=_date(2025, 12, 31),
        eligibility_criteria=(
            "Must be enrolled in a STEM program at an accredited university"
        ),
        application_instructions=(
            "Submit transcripts, research proposal, and recommendation letters"
        ),
    ),
    dict(
        title="Community Housing Development Grant",
        description=(
            "Supporting community-based housing projects and affordable rental "
            "developments."
        ),
        category=GrantCategory.HOUSING,
        country_id="netherlands",
        min_amount=Decimal("100000"),
        max_amount=Decimal("500000"),
        currency="EUR",
        total_spots=50,
        available_spots=50,
        deadline=_date(2025, 5, 31),
        eligibility_criteria=(
            "Non-profit organizations and community development entities"
        ),
        application_instructions=(
            "Submit project proposal, community impact assessment, and budget"
        ),
    ),
    dict(
        title="Technology Innovation Startup Grant",
        description=(
            "Funding for innovative technology startups and digital transformation "
            "initiatives."
        ),
        category=GrantCategory.INNOVATION,
        country_id="singapore",
        min_amount=Decimal("20000"),
        max_amount=Decimal("150000"),
        currency="SGD",
        total_spots=100,
        available_spots=100,
        deadline=_date(2025, 4, 30),
        eligibility_criteria="Technology startups less than 3 years old",
        application_instructions=(
            "Submit business plan, technology demo, and market analysis"
        ),
    ),
]


def seed_countries(db: DbClient) -> int:
    """Insert the default countries if none exist. Returns rows inserted."""
    inserted = 0
    try:
        if db.get_all_countries():
            return 0
        for country in DEFAULT_COUNTRIES:
            db.create_country(country)
            inserted += 1
    except Exception:
        logger.exception(
            "Error initializing countries after %d of %d",
            inserted,
            len(DEFAULT_COUNTRIES),
        )
        return inserted
    logger.info("Initialized %d default countries", inserted)
    return inserted


def seed_grants(db: DbClient) -> int:
    """Insert the sample grants if none exist. Returns rows inserted."""
    inserted = 0
    try:
        if db.get_all_grants():
            return 0
        for fields in SAMPLE_GRANTS:
            db.create_grant(
                GrantRecord(
                    amount_type=AmountType.RANGE, status=GrantStatus.ACTIVE, **fields
                )
            )
            inserted += 1
    except Exception:
        logger.exception(
            "Error initializing grants after %d of %d", inserted, len(SAMPLE_GRANTS)
        )
        return inserted
    logger.info("Initialized %d sample grants", inserted)
    return inserted


def seed_reference_data(db: DbClient) -> dict[str, int]:
    # Countries first: grants reference them.
    return {"countries": seed_countries(db), "grants": seed_grants(db)}
