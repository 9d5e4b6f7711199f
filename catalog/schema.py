"""
SQLAlchemy Core table definitions for the book catalog.
"""

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

books = Table(
    "books",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text),
    Column("author", Text),
    Column("genre", Text),
    Column("published_year", Integer),
    sqlite_autoincrement=True,
)

# Exact-match searches
Index("ix_books_author", books.c.author)
Index("ix_books_genre", books.c.genre)
Index("ix_books_published_year", books.c.published_year)
