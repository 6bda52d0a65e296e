"""Pydantic request/response schemas for the VC Reviews API.

These are separate from Protean commands (anti-corruption pattern). JSON
uses camelCase on the wire; snake_case is accepted on input as well.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class RatingsSchema(CamelModel):
    responsiveness: int = Field(ge=1, le=5)
    fairness: int = Field(ge=1, le=5)
    support: int = Field(ge=1, le=5)


class SubmitReviewRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "firmName": "Acme Ventures",
                    "ratings": {"responsiveness": 5, "fairness": 4, "support": 3},
                    "reviewText": "Quick to reply, fair term sheet, thin support after close.",
                    "industry": "Fintech",
                    "fundingStage": "Seed",
                    "yearOfInteraction": "2024",
                }
            ]
        },
    )

    firm_name: str = Field(min_length=1, max_length=255)
    firm_website: str | None = Field(default=None, max_length=500)
    ratings: RatingsSchema
    review_text: str = Field(min_length=1)
    company_name: str | None = Field(default=None, max_length=255)
    company_website: str | None = Field(default=None, max_length=500)
    industry: str | None = Field(default=None, max_length=100)
    role: str | None = Field(default=None, max_length=100)
    company_location: str | None = Field(default=None, max_length=255)
    funding_stage: str | None = Field(default=None, max_length=50)
    investment_amount: str | None = Field(default=None, max_length=50)
    year_of_interaction: str | None = Field(default=None, pattern=r"^\d{4}$")
    is_anonymous: bool = True


class RecordViewRequest(CamelModel):
    review_id: str = Field(min_length=1)


class UpgradePlanRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"examples": [{"plan": "premium"}]},
    )

    plan: str = Field(min_length=1, max_length=20)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PaginationSchema(CamelModel):
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool

    @classmethod
    def from_page(cls, page) -> PaginationSchema:
        return cls(page=page.page, limit=page.limit, total=page.total, pages=page.pages, has_next=page.has_next)


class FirmResponse(CamelModel):
    id: str
    name: str
    slug: str
    website: str | None = None
    avg_responsiveness: float
    avg_fairness: float
    avg_support: float
    avg_rating: float
    total_reviews: int
    last_review_date: datetime | None = None

    @classmethod
    def from_firm(cls, firm) -> FirmResponse:
        return cls(
            id=str(firm.id),
            name=firm.name,
            slug=firm.slug,
            website=firm.website,
            avg_responsiveness=firm.avg_responsiveness,
            avg_fairness=firm.avg_fairness,
            avg_support=firm.avg_support,
            avg_rating=firm.avg_rating,
            total_reviews=firm.total_reviews,
            last_review_date=firm.last_review_date,
        )


class SubmitReviewResponse(CamelModel):
    review_id: str
    firm: FirmResponse


class ReviewPreviewResponse(CamelModel):
    id: str
    firm_id: str
    firm_name: str
    ratings: RatingsSchema
    average_rating: float
    industry: str | None = None
    role: str | None = None
    funding_stage: str | None = None
    year_of_interaction: str | None = None
    company_name: str | None = None
    is_anonymous: bool
    created_at: datetime | None = None

    @staticmethod
    def _common(review) -> dict:
        return {
            "id": str(review.id),
            "firm_id": str(review.firm_id),
            "firm_name": review.firm_name,
            "ratings": RatingsSchema(
                responsiveness=review.ratings.responsiveness,
                fairness=review.ratings.fairness,
                support=review.ratings.support,
            ),
            "average_rating": review.average_rating,
            "industry": review.industry,
            "role": review.role,
            "funding_stage": review.funding_stage,
            "year_of_interaction": review.year_of_interaction,
            "company_name": None if review.is_anonymous else review.company_name,
            "is_anonymous": review.is_anonymous,
            "created_at": review.created_at,
        }

    @classmethod
    def from_review(cls, review) -> ReviewPreviewResponse:
        return cls(**cls._common(review))


class ReviewDetailResponse(ReviewPreviewResponse):
    review_text: str
    company_website: str | None = None
    company_location: str | None = None
    investment_amount: str | None = None

    @classmethod
    def from_review(cls, review) -> ReviewDetailResponse:
        return cls(
            **cls._common(review),
            review_text=review.body,
            company_website=None if review.is_anonymous else review.company_website,
            company_location=review.company_location,
            investment_amount=review.investment_amount,
        )


class ReviewListResponse(CamelModel):
    reviews: list[ReviewPreviewResponse]
    pagination: PaginationSchema


class FirmListResponse(CamelModel):
    firms: list[FirmResponse]
    pagination: PaginationSchema


class FirmDetailResponse(FirmResponse):
    reviews: list[ReviewPreviewResponse] | None = None
    pagination: PaginationSchema | None = None


class QuotaStatusResponse(CamelModel):
    views_this_month: int
    remaining_views: int | str
    has_reached_limit: bool
    is_premium: bool
    total_views: int
    period: str
    state: str

    @classmethod
    def from_status(cls, status) -> QuotaStatusResponse:
        return cls(
            views_this_month=status.views_this_month,
            remaining_views=status.remaining_views,
            has_reached_limit=status.has_reached_limit,
            is_premium=status.is_premium,
            total_views=status.total_views,
            period=status.period,
            state=status.state.value,
        )


class MemberResponse(CamelModel):
    id: str
    external_id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    image_url: str | None = None
    display_name: str
    plan: str
    provisioned_at: datetime | None = None
    upgraded_at: datetime | None = None
    quota: QuotaStatusResponse

    @classmethod
    def from_member(cls, member, status) -> MemberResponse:
        return cls(
            id=str(member.id),
            external_id=member.external_id,
            email=member.email,
            first_name=member.first_name,
            last_name=member.last_name,
            image_url=member.image_url,
            display_name=member.display_name,
            plan=member.plan,
            provisioned_at=member.provisioned_at,
            upgraded_at=member.upgraded_at,
            quota=QuotaStatusResponse.from_status(status),
        )


class RecordViewResponse(CamelModel):
    success: bool = True
    message: str = "Review view recorded"
    view_stats: QuotaStatusResponse
    review: ReviewDetailResponse
