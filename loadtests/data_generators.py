"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's request schemas and
the domain's validation rules (ratings 1..5, four-digit year, non-blank
review text).
"""

import random
import uuid

from faker import Faker

fake = Faker()

INDUSTRIES = ["Fintech", "Healthtech", "Climate", "Developer Tools", "Consumer", "Marketplaces", "AI"]
FUNDING_STAGES = ["Pre-seed", "Seed", "Series A", "Series B", "Growth"]
ROLES = ["Founder", "Co-founder", "CEO", "CTO"]

# A small, fixed pool keeps several reviews landing on the same firm so the
# rating recompute sees contention.
FIRM_POOL = [f"{fake.last_name()} {random.choice(['Ventures', 'Capital', 'Partners'])}" for _ in range(25)]


def unique_external_id() -> str:
    """Generate unique caller ids like 'user_lt_a1b2c3d4'."""
    return f"user_lt_{uuid.uuid4().hex[:8]}"


def firm_name(pool: bool = True) -> str:
    if pool:
        return random.choice(FIRM_POOL)
    return f"{fake.company()} Ventures"[:255]


def ratings() -> dict:
    return {
        "responsiveness": random.randint(1, 5),
        "fairness": random.randint(1, 5),
        "support": random.randint(1, 5),
    }


def review_data(firm: str | None = None) -> dict:
    """Generate a SubmitReviewRequest payload (camelCase, as clients send it)."""
    anonymous = random.random() < 0.7
    return {
        "firmName": firm or firm_name(),
        "ratings": ratings(),
        "reviewText": fake.paragraph(nb_sentences=random.randint(2, 6)),
        "companyName": None if anonymous else fake.company()[:255],
        "industry": random.choice(INDUSTRIES),
        "role": random.choice(ROLES),
        "companyLocation": fake.city()[:255],
        "fundingStage": random.choice(FUNDING_STAGES),
        "yearOfInteraction": str(random.randint(2015, 2025)),
        "isAnonymous": anonymous,
    }
