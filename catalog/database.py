"""
Relational storage for book records.
Handles the engine lifecycle, schema creation and the hand-written queries
behind every catalog lookup and mutation.
"""

from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import create_engine, delete, func, insert, select, text, update
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .models import Book
from .schema import books, metadata

logger = structlog.get_logger(__name__)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for ``database_url``.

    SQLite connections are shared across FastAPI's worker threads, and an
    in-memory database is pinned to a single connection so every request
    sees the same data.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo)

    engine_kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool
    return create_engine(database_url, echo=echo, **engine_kwargs)


class DatabaseManager:
    """
    Owns the SQLAlchemy engine for the catalog database.
    Handles connection checks, schema creation and health reporting.
    """

    def __init__(self, database_url: str, echo: bool = False):
        """
        Initialize database manager.

        Args:
            database_url: SQLAlchemy database URL
            echo: Log every SQL statement through SQLAlchemy
        """
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[Engine] = None

    def connect(self) -> Engine:
        """Create the engine, verify the connection and create the schema."""
        try:
            self.engine = create_db_engine(self.database_url, echo=self.echo)
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            metadata.create_all(self.engine)
            logger.info("Connected to catalog database", url=self.engine.url.render_as_string(hide_password=True))
            return self.engine
        except SQLAlchemyError as e:
            logger.error("Failed to connect to catalog database", error=str(e))
            raise

    def disconnect(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            logger.info("Disconnected from catalog database")

    def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        if self.engine is None:
            return {"status": "unhealthy", "error": "not connected"}
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                books_count = conn.execute(select(func.count()).select_from(books)).scalar_one()
            return {"status": "healthy", "books_table": "accessible", "books_count": books_count}
        except SQLAlchemyError as e:
            logger.error("Database health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

    def get_stats(self) -> Dict[str, Any]:
        """Get row counts for the books table, overall and per genre."""
        try:
            with self.engine.connect() as conn:
                total = conn.execute(select(func.count()).select_from(books)).scalar_one()
                rows = conn.execute(
                    select(books.c.genre, func.count())
                    .group_by(books.c.genre)
                    .order_by(books.c.genre)
                ).all()
            return {
                "total_books": total,
                "books_by_genre": {genre: count for genre, count in rows},
            }
        except SQLAlchemyError as e:
            logger.error("Failed to get database stats", error=str(e))
            raise


class BookRepository:
    """
    Explicit repository over the ``books`` table.

    Each method runs in its own transaction. Multi-row queries are ordered by
    id for stable output; callers should not rely on that order.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def save(self, book: Book) -> Book:
        """
        Insert a new book or overwrite an existing row.

        Args:
            book: Book to persist; a book without an id is inserted

        Returns:
            The persisted book, carrying its id
        """
        try:
            with self.engine.begin() as conn:
                if book.is_new:
                    result = conn.execute(insert(books).values(**book.to_row()))
                    book_id = result.inserted_primary_key[0]
                    logger.debug("Inserted book", book_id=book_id)
                    return book.model_copy(update={"id": book_id})

                conn.execute(
                    update(books).where(books.c.id == book.id).values(**book.to_row())
                )
                logger.debug("Updated book", book_id=book.id)
                return book
        except SQLAlchemyError as e:
            logger.error("Failed to save book", book_id=book.id, error=str(e))
            raise

    def find_by_id(self, book_id: int) -> Optional[Book]:
        """
        Retrieve a book by its id.

        Returns:
            Book or None if not found
        """
        try:
            with self.engine.connect() as conn:
                row = conn.execute(select(books).where(books.c.id == book_id)).first()
            return self._row_to_book(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error("Failed to get book by ID", book_id=book_id, error=str(e))
            raise

    def find_all(self) -> List[Book]:
        """Retrieve every book."""
        return self._find(select(books), operation="find_all")

    def exists_by_id(self, book_id: int) -> bool:
        try:
            with self.engine.connect() as conn:
                found = conn.execute(select(books.c.id).where(books.c.id == book_id)).first()
            return found is not None
        except SQLAlchemyError as e:
            logger.error("Failed to check book existence", book_id=book_id, error=str(e))
            raise

    def delete_by_id(self, book_id: int) -> int:
        """
        Delete a book by its id.

        Returns:
            Number of rows removed (0 or 1)
        """
        try:
            with self.engine.begin() as conn:
                result = conn.execute(delete(books).where(books.c.id == book_id))
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise

    def find_by_author(self, author: str) -> List[Book]:
        return self._find(select(books).where(books.c.author == author), operation="find_by_author")

    def find_by_genre(self, genre: str) -> List[Book]:
        return self._find(select(books).where(books.c.genre == genre), operation="find_by_genre")

    def find_by_published_year(self, published_year: int) -> List[Book]:
        return self._find(
            select(books).where(books.c.published_year == published_year),
            operation="find_by_published_year",
        )

    def find_by_title_containing(self, title: str) -> List[Book]:
        """
        Case-insensitive substring match on the title.
        ``%`` and ``_`` in ``title`` are matched literally.
        """
        return self._find(
            select(books).where(books.c.title.icontains(title, autoescape=True)),
            operation="find_by_title_containing",
        )

    def _find(self, query, operation: str) -> List[Book]:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(query.order_by(books.c.id)).all()
            logger.debug("Book query completed", operation=operation, count=len(rows))
            return [self._row_to_book(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error("Book query failed", operation=operation, error=str(e))
            raise

    @staticmethod
    def _row_to_book(row: Row) -> Book:
        """Convert a database row to a Book instance."""
        return Book.model_validate(dict(row._mapping))
