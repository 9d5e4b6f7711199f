"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from catalog.models import Book

# Widest values the store and the public contract accept
BOOK_ID_MIN = -(2**63)
BOOK_ID_MAX = 2**63 - 1
YEAR_MIN = -(2**31)
YEAR_MAX = 2**31 - 1


class BookRequest(BaseModel):
    """
    Request body for creating or updating a book.

    Every field is optional; on update an omitted field clears the stored
    value. A client-supplied ``id`` is not part of the schema and is ignored.
    """
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Author name")
    genre: Optional[str] = Field(None, description="Book genre")
    published_year: Optional[int] = Field(
        None, alias="publishedYear", ge=YEAR_MIN, le=YEAR_MAX, description="Year of publication"
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "title": "Dune",
                "author": "Frank Herbert",
                "genre": "SciFi",
                "publishedYear": 1965,
            }
        },
    }

    def to_book(self) -> Book:
        """Build an unsaved catalog book from the request body."""
        return Book(
            title=self.title,
            author=self.author,
            genre=self.genre,
            published_year=self.published_year,
        )


class BookResponse(BaseModel):
    """Book response model for API."""
    id: int = Field(..., description="Unique book identifier")
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Author name")
    genre: Optional[str] = Field(None, description="Book genre")
    published_year: Optional[int] = Field(None, alias="publishedYear", description="Year of publication")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_book(cls, book: Book) -> "BookResponse":
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            genre=book.genre,
            published_year=book.published_year,
        )


class MessageResponse(BaseModel):
    """Human-readable outcome message."""
    message: str = Field(..., description="Outcome message")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
