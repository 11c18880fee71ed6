"""
Book Review API Package

REST backend for the book-review application: users register and log in,
browse books, submit one review per book, and administrators upload books
and read aggregate statistics.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: Explicit SQLAlchemy database handle and session dependency
- exceptions.py: Domain errors and their JSON rendering
- main.py: FastAPI application factory
- dependencies.py: Dependency injection (sessions, access policy)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (accounts, reviews, ratings, stats, images)
"""

__version__ = "0.1.0"
