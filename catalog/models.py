"""
Pydantic models for the book catalog.
Defines the Book record and the search fields the catalog supports.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SearchField(str, Enum):
    """Fields a catalog search can be run against."""
    AUTHOR = "author"
    YEAR = "year"
    GENRE = "genre"
    TITLE = "title"


# Attributes copied by an update; ``id`` is never among them.
MUTABLE_FIELDS = ("title", "author", "genre", "published_year")


class Book(BaseModel):
    """
    Book record as stored in the catalog.

    A book without an ``id`` has not been persisted yet; the store assigns
    one on first insert.
    """
    id: Optional[int] = Field(None, description="Identifier assigned by the store")
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Author name")
    genre: Optional[str] = Field(None, description="Book genre")
    published_year: Optional[int] = Field(
        None, alias="publishedYear", description="Year of publication"
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "id": 1,
                "title": "Dune",
                "author": "Frank Herbert",
                "genre": "SciFi",
                "publishedYear": 1965,
            }
        },
    }

    @property
    def is_new(self) -> bool:
        """Whether the book has not been persisted yet."""
        return self.id is None

    def merged_with(self, payload: "Book") -> "Book":
        """
        Return a copy of this book with every mutable field taken from ``payload``.

        Every field is copied, including ``None`` values, so an omitted field
        clears the stored value. The payload's ``id`` is ignored.
        """
        return self.model_copy(
            update={name: getattr(payload, name) for name in MUTABLE_FIELDS}
        )

    def to_row(self) -> dict:
        """Column values for the ``books`` table, without the id."""
        return {name: getattr(self, name) for name in MUTABLE_FIELDS}
