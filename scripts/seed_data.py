#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    python scripts/seed_data.py --admin-email admin@example.com --admin-password secret

    # Credentials can also come from the environment
    SEED_ADMIN_EMAIL=admin@example.com SEED_ADMIN_PASSWORD=secret python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (unless --keep is given)
3. Creates an administrator, two readers, sample books and reviews
4. Recomputes every book's average rating

There is no API for granting the admin role; this script (or a manual
UPDATE of users.is_admin) is how the first administrator is created.
"""

import argparse
import os

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookreview.config import get_settings
from bookreview.database import Database
from bookreview.models import Book, Review, User
from bookreview.services.ratings import recalculate_all_book_ratings
from bookreview.services.security import hash_password


BOOKS_DATA = [
    {
        "title": "1984",
        "author": "George Orwell",
        "description": "A dystopian novel about surveillance and totalitarian control.",
        "image": "https://covers.openlibrary.org/b/isbn/9780451524935-L.jpg",
    },
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "description": "Elizabeth Bennet navigates manners, marriage and misjudgement.",
        "image": "https://covers.openlibrary.org/b/isbn/9780141439518-L.jpg",
    },
    {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "description": "Bilbo Baggins embarks on a quest to reclaim the Lonely Mountain.",
        "image": "https://covers.openlibrary.org/b/isbn/9780547928227-L.jpg",
    },
    {
        "title": "Foundation",
        "author": "Isaac Asimov",
        "description": "The first novel in the Foundation series about the fall of the Galactic Empire.",
        "image": "https://covers.openlibrary.org/b/isbn/9780553293357-L.jpg",
    },
]

# (reader index, book index, rating, text)
REVIEWS_DATA = [
    (0, 0, 5, "Chilling and still relevant."),
    (1, 0, 4, "Bleak, but brilliantly built."),
    (0, 1, 4, "Witty from the first line."),
    (1, 2, 5, "A perfect adventure."),
    (0, 3, 3, "Big ideas, thin characters."),
]


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Review))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_users(db: Session, admin_email: str, admin_password: str) -> list[User]:
    """Create the administrator and two readers; returns the readers."""
    print("Creating users...")
    admin = User(
        username="admin",
        email=admin_email.lower(),
        hashed_password=hash_password(admin_password),
        is_admin=True,
    )
    readers = [
        User(
            username=f"reader{i}",
            email=f"reader{i}@example.com",
            hashed_password=hash_password("reader-password"),
        )
        for i in (1, 2)
    ]
    db.add(admin)
    db.add_all(readers)
    db.commit()

    print(f"Created admin {admin.email} and {len(readers)} readers.")
    return readers


def create_books(db: Session) -> list[Book]:
    print("Creating books...")
    books = [Book(**data) for data in BOOKS_DATA]
    db.add_all(books)
    db.commit()

    print(f"Created {len(books)} books.")
    return books


def create_reviews(db: Session, readers: list[User], books: list[Book]) -> int:
    print("Creating reviews...")
    for reader_index, book_index, rating, text in REVIEWS_DATA:
        db.add(Review(
            user_id=readers[reader_index].id,
            book_id=books[book_index].id,
            rating=rating,
            review_text=text,
        ))
    db.commit()

    print(f"Created {len(REVIEWS_DATA)} reviews.")
    return len(REVIEWS_DATA)


def seed_database(admin_email: str, admin_password: str, clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        admin_email: Login of the administrator account
        admin_password: Its password
        clear_existing: If True, clears existing data before seeding.
    """
    settings = get_settings()
    database = Database.from_settings(settings)

    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    database.create_tables()
    db = database.session()

    try:
        if clear_existing:
            clear_data(db)

        readers = create_users(db, admin_email, admin_password)
        books = create_books(db)
        review_count = create_reviews(db, readers, books)
        recalculate_all_book_ratings(db)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(readers) + 1}")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {review_count}")
        print(f"\nYou can now access the API at http://localhost:{settings.port}")
        print(f"API documentation at http://localhost:{settings.port}/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        database.dispose()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the book review database.")
    parser.add_argument(
        "--admin-email",
        default=os.environ.get("SEED_ADMIN_EMAIL", "admin@example.com"),
    )
    parser.add_argument(
        "--admin-password",
        default=os.environ.get("SEED_ADMIN_PASSWORD"),
        required="SEED_ADMIN_PASSWORD" not in os.environ,
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing data instead of clearing it first",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    seed_database(args.admin_email, args.admin_password, clear_existing=not args.keep)
