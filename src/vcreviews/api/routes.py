"""FastAPI routes for the VC Reviews context.

Each route translates between Pydantic schemas (external contract) and
Protean commands or the access gate (internal domain concepts).

Routes that go through the access gate or the submission flow may block on
the identity provider or a per-key lock, so they are plain ``def`` handlers
and run in FastAPI's threadpool.
"""

from fastapi import APIRouter, Depends, Query

from vcreviews.access.gate import AccessGate
from vcreviews.api.dependencies import caller_identity, get_access_gate, get_firm_locks
from vcreviews.api.schemas import (
    FirmDetailResponse,
    FirmListResponse,
    FirmResponse,
    MemberResponse,
    PaginationSchema,
    QuotaStatusResponse,
    RecordViewRequest,
    RecordViewResponse,
    ReviewDetailResponse,
    ReviewListResponse,
    ReviewPreviewResponse,
    SubmitReviewRequest,
    SubmitReviewResponse,
    UpgradePlanRequest,
)
from vcreviews.firm.directory import get_firm_by_slug, list_firms
from vcreviews.quota.recording import quota_status_for
from vcreviews.review.queries import list_reviews, reviews_by_author
from vcreviews.review.submission import SubmitReview, submit_review
from vcreviews.shared.locks import KeyedLock

review_router = APIRouter(prefix="/reviews", tags=["reviews"])
firm_router = APIRouter(prefix="/firms", tags=["firms"])
member_router = APIRouter(prefix="/members", tags=["members"])


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
@review_router.post("", status_code=201, response_model=SubmitReviewResponse)
def submit_review_route(
    body: SubmitReviewRequest,
    identity: str | None = Depends(caller_identity),
    gate: AccessGate = Depends(get_access_gate),
    firm_locks: KeyedLock = Depends(get_firm_locks),
) -> SubmitReviewResponse:
    """Submit a review; the response carries the firm's updated aggregate."""
    author_id = str(gate.provision(identity).id) if identity else None
    command = SubmitReview(
        firm_name=body.firm_name,
        firm_website=body.firm_website,
        author_id=author_id,
        responsiveness=body.ratings.responsiveness,
        fairness=body.ratings.fairness,
        support=body.ratings.support,
        review_text=body.review_text,
        company_name=body.company_name,
        company_website=body.company_website,
        industry=body.industry,
        role=body.role,
        company_location=body.company_location,
        funding_stage=body.funding_stage,
        investment_amount=body.investment_amount,
        year_of_interaction=body.year_of_interaction,
        is_anonymous=body.is_anonymous,
    )
    result = submit_review(command, locks=firm_locks)
    return SubmitReviewResponse(review_id=result.review_id, firm=FirmResponse.from_firm(result.firm))


@review_router.get("", response_model=ReviewListResponse)
async def list_reviews_route(
    firm: str | None = None,
    industry: str | None = None,
    year: str | None = Query(default=None, pattern=r"^\d{4}$"),
    sort: str = Query(default="newest", pattern="^(newest|highest)$"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> ReviewListResponse:
    """Browse review previews. Full review text is only served through the access gate."""
    result = list_reviews(firm=firm, industry=industry, year=year, sort=sort, page=page, limit=limit)
    return ReviewListResponse(
        reviews=[ReviewPreviewResponse.from_review(review) for review in result.items],
        pagination=PaginationSchema.from_page(result),
    )


# ---------------------------------------------------------------------------
# Firms
# ---------------------------------------------------------------------------
@firm_router.get("", response_model=FirmListResponse)
async def list_firms_route(
    search: str | None = None,
    sort: str = Query(default="rating", pattern="^(rating|name|reviews|recent)$"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
) -> FirmListResponse:
    result = list_firms(search=search, sort=sort, page=page, limit=limit)
    return FirmListResponse(
        firms=[FirmResponse.from_firm(firm) for firm in result.items],
        pagination=PaginationSchema.from_page(result),
    )


@firm_router.get("/{slug}", response_model=FirmDetailResponse)
async def get_firm_route(
    slug: str,
    include_reviews: bool = Query(default=False, alias="includeReviews"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> FirmDetailResponse:
    firm = get_firm_by_slug(slug)
    response = FirmDetailResponse(**FirmResponse.from_firm(firm).model_dump())
    if include_reviews:
        reviews = list_reviews(firm=firm.slug, page=page, limit=limit)
        response.reviews = [ReviewPreviewResponse.from_review(review) for review in reviews.items]
        response.pagination = PaginationSchema.from_page(reviews)
    return response


# ---------------------------------------------------------------------------
# Members (the caller's own record)
# ---------------------------------------------------------------------------
@member_router.get("/me", response_model=MemberResponse)
def get_me(
    identity: str | None = Depends(caller_identity),
    gate: AccessGate = Depends(get_access_gate),
) -> MemberResponse:
    member = gate.provision(identity)
    return MemberResponse.from_member(member, quota_status_for(member))


@member_router.post("/me/sync", response_model=MemberResponse)
def sync_me(
    identity: str | None = Depends(caller_identity),
    gate: AccessGate = Depends(get_access_gate),
) -> MemberResponse:
    member = gate.sync_profile(identity)
    return MemberResponse.from_member(member, quota_status_for(member))


@member_router.put("/me/plan", response_model=MemberResponse)
def upgrade_my_plan(
    body: UpgradePlanRequest,
    identity: str | None = Depends(caller_identity),
    gate: AccessGate = Depends(get_access_gate),
) -> MemberResponse:
    member = gate.upgrade_plan(identity, body.plan)
    return MemberResponse.from_member(member, quota_status_for(member))


@member_router.get("/me/quota", response_model=QuotaStatusResponse)
def get_my_quota(
    identity: str | None = Depends(caller_identity),
    gate: AccessGate = Depends(get_access_gate),
) -> QuotaStatusResponse:
    return QuotaStatusResponse.from_status(gate.quota_status(identity))


@member_router.post("/me/views", response_model=RecordViewResponse)
def record_view(
    body: RecordViewRequest,
    identity: str | None = Depends(caller_identity),
    gate: AccessGate = Depends(get_access_gate),
) -> RecordViewResponse:
    """Open a full review. Free members spend one of their monthly views; a 403 means none are left."""
    read = gate.view_review(identity, body.review_id)
    return RecordViewResponse(
        view_stats=QuotaStatusResponse.from_status(read.status),
        review=ReviewDetailResponse.from_review(read.review),
    )


@member_router.get("/me/reviews", response_model=ReviewListResponse)
def list_my_reviews(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    identity: str | None = Depends(caller_identity),
    gate: AccessGate = Depends(get_access_gate),
) -> ReviewListResponse:
    """Reviews the caller submitted while signed in, newest first."""
    member = gate.provision(identity)
    result = reviews_by_author(member.id, page=page, limit=limit)
    return ReviewListResponse(
        reviews=[ReviewPreviewResponse.from_review(review) for review in result.items],
        pagination=PaginationSchema.from_page(result),
    )
