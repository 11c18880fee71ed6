#!/usr/bin/env python3
"""
Recalculate Ratings Script

Recomputes Book.average_rating for every book from its reviews.
Run it after bulk imports or manual database edits.

USAGE:
    python scripts/recalculate_ratings.py
"""

from bookreview.config import get_settings
from bookreview.database import Database
from bookreview.services.ratings import recalculate_all_book_ratings


def main() -> None:
    database = Database.from_settings(get_settings())
    db = database.session()

    try:
        count = recalculate_all_book_ratings(db)
        print(f"Recalculated average rating for {count} books.")
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
