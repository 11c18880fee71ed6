"""
Test Suite for the Book Review API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_auth.py: /api/register and /api/login
- test_books.py: /api/books endpoints and image upload
- test_reviews.py: Review lifecycle and ownership rules
- test_ratings.py: Average-rating recomputation
- test_admin.py: Access policy and /api/admin/stats
- test_app.py: Ping/health, error format, configuration
- test_rate_limits.py: 429 responses for registration and review submission

Running Tests:
    pytest
    pytest tests/test_reviews.py
    pytest -v
"""
