from vcreviews.api.routes import firm_router, member_router, review_router

__all__ = ["firm_router", "member_router", "review_router"]
