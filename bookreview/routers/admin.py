"""
Admin Router

- GET /admin/stats - User/book/review counts and the top-rated books
"""

from fastapi import APIRouter

from bookreview.dependencies import AdminUser, DbSession
from bookreview.schemas import AdminStatsResponse, BookResponse
from bookreview.services.stats import get_admin_stats

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admin only"},
    },
)


@router.get(
    "/stats",
    response_model=AdminStatsResponse,
    summary="Dashboard statistics",
    description="Totals plus the five books with the highest average rating.",
)
def admin_stats(db: DbSession, admin: AdminUser) -> AdminStatsResponse:
    stats = get_admin_stats(db)

    return AdminStatsResponse(
        total_users=stats["total_users"],
        total_books=stats["total_books"],
        total_reviews=stats["total_reviews"],
        top_books=[BookResponse.model_validate(book) for book in stats["top_books"]],
    )
