"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api.main import app
from catalog.database import BookRepository, DatabaseManager
from catalog.models import Book
from catalog.service import BookLookupService, BookMutationService


@pytest.fixture
def db_manager(tmp_path):
    """Database manager connected to a fresh SQLite file."""
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'books.db'}")
    manager.connect()
    yield manager
    manager.disconnect()


@pytest.fixture
def repository(db_manager):
    return BookRepository(db_manager.engine)


@pytest.fixture
def lookup_service(repository):
    return BookLookupService(repository)


@pytest.fixture
def mutation_service(repository):
    return BookMutationService(repository)


@pytest.fixture
def sample_book():
    """Create sample book data for testing."""
    return Book(title="Dune", author="Frank Herbert", genre="SciFi", published_year=1965)


@pytest.fixture
def sample_books():
    """A small catalogue with shared authors, genres and years."""
    return [
        Book(title="Dune", author="Frank Herbert", genre="SciFi", published_year=1965),
        Book(title="War and Peace", author="Leo Tolstoy", genre="Historical", published_year=1869),
        Book(title="Warp Drive", author="Jane Doe", genre="SciFi", published_year=2001),
        Book(title="Anna Karenina", author="Leo Tolstoy", genre="Romance", published_year=1878),
        Book(title="Children of Dune", author="Frank Herbert", genre="SciFi", published_year=1976),
    ]


@pytest.fixture
def stored_books(repository, sample_books):
    """Persist the sample catalogue and return the stored records."""
    return [repository.save(book) for book in sample_books]


@pytest.fixture
def client(db_manager, lookup_service, mutation_service):
    """Test client whose services are wired to the temporary database."""
    with patch.multiple(
        "api.main",
        db_manager=db_manager,
        lookup_service=lookup_service,
        mutation_service=mutation_service,
    ):
        yield TestClient(app)
