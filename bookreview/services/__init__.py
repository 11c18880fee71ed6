"""
Services Package

Business logic kept separate from HTTP handling (routers) so it can be
tested directly against a session.

Current services:
- accounts.py: Registration and credential checks
- books.py: Book catalog reads and admin book creation
- images.py: Storage for uploaded cover images
- rate_limiter.py: Rate limiting with slowapi
- ratings.py: Book average-rating recomputation
- reviews.py: Review ownership rules and lifecycle
- security.py: Password hashing and JWT utilities
- stats.py: Admin dashboard aggregates
"""
