"""
API Routers Package

FastAPI routers grouping related endpoints. Each one is mounted under
/api in main.py.

Router Structure:
- auth.py: /api/register, /api/login
- books.py: /api/books, /api/books/{book_id}
- reviews.py: /api/books/{book_id}/review, /api/reviews/{review_id}
- admin.py: /api/admin/stats
"""

from bookreview.routers.admin import router as admin_router
from bookreview.routers.auth import router as auth_router
from bookreview.routers.books import router as books_router
from bookreview.routers.reviews import router as reviews_router

__all__ = [
    "admin_router",
    "auth_router",
    "books_router",
    "reviews_router",
]
