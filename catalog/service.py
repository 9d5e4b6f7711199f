"""
Service layer for the book catalog.

Lookups delegate straight to the repository. Mutations carry the add,
update-by-merge and delete-if-exists rules. A missing book is a normal
outcome here: lookups return ``None`` or an empty list, ``update_by_id``
returns ``None`` and ``delete_by_id`` returns ``False``.
"""

from typing import List, Optional

import structlog

from .database import BookRepository
from .models import Book

logger = structlog.get_logger(__name__)


class BookLookupService:
    """Read-only queries over the catalog."""

    def __init__(self, repository: BookRepository):
        self.repository = repository

    def get_all(self) -> List[Book]:
        return self.repository.find_all()

    def get_by_id(self, book_id: int) -> Optional[Book]:
        return self.repository.find_by_id(book_id)

    def get_by_author(self, author: str) -> List[Book]:
        """Books whose author equals ``author`` exactly."""
        return self.repository.find_by_author(author)

    def get_by_genre(self, genre: str) -> List[Book]:
        return self.repository.find_by_genre(genre)

    def get_by_published_year(self, published_year: int) -> List[Book]:
        return self.repository.find_by_published_year(published_year)

    def get_by_title(self, title: str) -> List[Book]:
        """Books whose title contains ``title``, ignoring case."""
        return self.repository.find_by_title_containing(title)


class BookMutationService:
    """Add, update and delete operations on the catalog."""

    def __init__(self, repository: BookRepository):
        self.repository = repository

    def add(self, candidate: Book) -> Book:
        """
        Persist ``candidate`` as a new book.

        Any id on the candidate is discarded so the store assigns a fresh one.
        Field contents are not validated.
        """
        book = self.repository.save(candidate.model_copy(update={"id": None}))
        logger.info("Book created", book_id=book.id)
        return book

    def update_by_id(self, book_id: int, payload: Book) -> Optional[Book]:
        """
        Overwrite the stored book's fields with those of ``payload``.

        This is a full overwrite: fields that are ``None`` in the payload
        clear the stored value. The payload's own id is ignored.

        Returns:
            The updated book, or None when no book has ``book_id``
        """
        existing = self.repository.find_by_id(book_id)
        if existing is None:
            logger.warning("Book not found for update", book_id=book_id)
            return None

        updated = self.repository.save(existing.merged_with(payload))
        logger.info("Book updated", book_id=book_id)
        return updated

    def delete_by_id(self, book_id: int) -> bool:
        """
        Delete the book with ``book_id`` if it exists.

        Returns:
            True if the book was deleted, False if it was not found
        """
        if not self.repository.exists_by_id(book_id):
            logger.warning("Book not found for deletion", book_id=book_id)
            return False

        self.repository.delete_by_id(book_id)
        logger.info("Book deleted", book_id=book_id)
        return True
