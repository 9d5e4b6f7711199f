"""
Book catalog: record model, relational storage and services.
"""

from .database import BookRepository, DatabaseManager
from .models import Book, SearchField
from .service import BookLookupService, BookMutationService

__all__ = [
    "Book",
    "BookLookupService",
    "BookMutationService",
    "BookRepository",
    "DatabaseManager",
    "SearchField",
]
