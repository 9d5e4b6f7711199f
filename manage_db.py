#!/usr/bin/env python3
"""
Catalog Database Management Utility

This script provides utilities to manage the book catalog:
- Create the database schema
- Seed a small sample catalogue
- List all books
- Show catalog statistics
"""

import sys
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from catalog.database import BookRepository, DatabaseManager
from catalog.models import Book
from catalog.service import BookLookupService, BookMutationService
from utilities.config import config
from utilities.logger import setup_logging

SAMPLE_BOOKS = [
    Book(title="Dune", author="Frank Herbert", genre="SciFi", published_year=1965),
    Book(title="War and Peace", author="Leo Tolstoy", genre="Historical", published_year=1869),
    Book(title="Anna Karenina", author="Leo Tolstoy", genre="Romance", published_year=1878),
    Book(title="The Left Hand of Darkness", author="Ursula K. Le Guin", genre="SciFi", published_year=1969),
    Book(title="Pride and Prejudice", author="Jane Austen", genre="Romance", published_year=1813),
]


def init_database(db_manager: DatabaseManager) -> None:
    """Create the schema (connecting creates any missing tables)."""
    print("\n🗄️  INITIALIZING DATABASE")
    print("=" * 80)
    db_manager.connect()
    print(f"✅ Schema ready at {db_manager.database_url}")


def seed_books(db_manager: DatabaseManager) -> List[Book]:
    """Insert the sample catalogue."""
    print("\n🌱 SEEDING SAMPLE BOOKS")
    print("=" * 80)
    mutations = BookMutationService(BookRepository(db_manager.engine))
    created = [mutations.add(book) for book in SAMPLE_BOOKS]
    for book in created:
        print(f"  + [{book.id}] {book.title} by {book.author}")
    print(f"✅ Added {len(created)} books")
    return created


def list_books(db_manager: DatabaseManager) -> List[Book]:
    """List all books in the database."""
    print("\n📋 ALL BOOKS")
    print("=" * 80)
    books = BookLookupService(BookRepository(db_manager.engine)).get_all()
    if not books:
        print("❌ No books found in database")
        return books

    print(f"✅ Found {len(books)} books:")
    print()
    for book in books:
        print(f"{book.id:4d}. {book.title}")
        print(f"      Author: {book.author}")
        print(f"      Genre: {book.genre}")
        print(f"      Published: {book.published_year}")
    return books


def show_statistics(db_manager: DatabaseManager) -> dict:
    """Show row counts overall and per genre."""
    print("\n📊 CATALOG STATISTICS")
    print("=" * 80)
    stats = db_manager.get_stats()
    print(f"📚 Total Books: {stats['total_books']}")
    for genre, count in stats["books_by_genre"].items():
        print(f"   {genre or '(no genre)'}: {count}")
    return stats


COMMANDS = {
    "init": init_database,
    "seed": seed_books,
    "list": list_books,
    "stats": show_statistics,
}


def print_usage() -> None:
    print("Usage: python manage_db.py [init|seed|list|stats]")
    print()
    print("Commands:")
    print("  init     - Create the database schema")
    print("  seed     - Insert a small sample catalogue")
    print("  list     - List all books")
    print("  stats    - Show catalog statistics")


def main(argv: Optional[List[str]] = None, database_url: Optional[str] = None) -> int:
    """Main function."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print_usage()
        return 1

    command = args[0].lower()
    if command not in COMMANDS:
        print(f"❌ Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS)}")
        return 1

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )

    db_manager = DatabaseManager(database_url or config.database_url, echo=config.database_echo)
    try:
        if command != "init":
            db_manager.connect()
        COMMANDS[command](db_manager)
        return 0
    except Exception as e:
        print(f"❌ Error running '{command}': {e}")
        return 1
    finally:
        db_manager.disconnect()


if __name__ == "__main__":
    sys.exit(main())
