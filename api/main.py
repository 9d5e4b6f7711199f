"""
FastAPI main application for the Book Management API.
"""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated, List, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Path, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import config as api_config
from api.models import (
    BOOK_ID_MAX, BOOK_ID_MIN, YEAR_MAX, YEAR_MIN,
    BookRequest, BookResponse, ErrorResponse, HealthResponse, MessageResponse
)
from catalog.database import BookRepository, DatabaseManager
from catalog.models import Book, SearchField
from catalog.service import BookLookupService, BookMutationService
from utilities.config import config
from utilities.logger import bind_request_context, clear_request_context, setup_logging

# Setup logging
logger = structlog.get_logger(__name__)

# Wired by the lifespan handler
db_manager: Optional[DatabaseManager] = None
lookup_service: Optional[BookLookupService] = None
mutation_service: Optional[BookMutationService] = None

SEARCH_MISS_MESSAGES = {
    SearchField.AUTHOR: "No books found for author '{value}'. Please check the spelling and try again.",
    SearchField.YEAR: "No books found for year '{value}'. Please check the year and try again.",
    SearchField.GENRE: "No books found for genre '{value}'. Please check the spelling and try again.",
    SearchField.TITLE: "No books found with title containing '{value}'. Please check the spelling and try again.",
}
BOOK_NOT_FOUND_MESSAGE = "The book with ID {book_id} is not present in our library. Please check the ID and try again."
BOOK_DELETED_MESSAGE = "The book with ID {book_id} has been successfully deleted."
BOOK_NOT_DELETED_MESSAGE = "The book with ID {book_id} is not present in our library and could not be deleted."

BookId = Annotated[int, Path(ge=BOOK_ID_MIN, le=BOOK_ID_MAX, description="Book identifier")]
PublishedYear = Annotated[int, Path(ge=YEAR_MIN, le=YEAR_MAX, description="Year of publication")]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global db_manager, lookup_service, mutation_service

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )
    logger.info("Starting Book Management API")

    manager = DatabaseManager(config.database_url, echo=config.database_echo)
    try:
        manager.connect()
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        raise

    repository = BookRepository(manager.engine)
    db_manager = manager
    lookup_service = BookLookupService(repository)
    mutation_service = BookMutationService(repository)

    yield

    logger.info("Shutting down Book Management API")
    manager.disconnect()
    db_manager = None
    lookup_service = None
    mutation_service = None


# Create FastAPI application
app = FastAPI(
    title=api_config.api_title,
    description=api_config.api_description,
    version=api_config.api_version,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status code and duration."""
    bind_request_context(method=request.method, path=request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        logger.info(
            "Request handled",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2)
        )
        return response
    finally:
        clear_request_context()


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=str(exc.detail),
            status_code=exc.status_code
        ).model_dump(),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc) if api_config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


# Dependencies
def get_lookup_service() -> BookLookupService:
    if lookup_service is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database service not available"
        )
    return lookup_service


def get_mutation_service() -> BookMutationService:
    if mutation_service is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database service not available"
        )
    return mutation_service


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=MessageResponse(message=message).model_dump())


def _search_result(books: List[Book], field: SearchField, value):
    """200 with the matching books, or 404 naming the search key."""
    if not books:
        logger.debug("Search matched no books", field=field.value, value=value)
        return _message(status.HTTP_404_NOT_FOUND, SEARCH_MISS_MESSAGES[field].format(value=value))
    return [BookResponse.from_book(book) for book in books]


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """Health check endpoint."""
    db_status = "unavailable"
    if db_manager:
        db_status = db_manager.health_check().get("status", "unknown")

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=api_config.api_version,
        database_status=db_status
    )


# Books endpoints
@app.post(
    "/api/books",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Books"]
)
def add_book(
    book_in: BookRequest,
    service: BookMutationService = Depends(get_mutation_service)
):
    """Add a new book. The identifier is assigned by the store."""
    book = service.add(book_in.to_book())
    return BookResponse.from_book(book)


@app.get("/api/books", response_model=List[BookResponse], tags=["Books"])
def get_all_books(service: BookLookupService = Depends(get_lookup_service)):
    """Get every book in the library."""
    return [BookResponse.from_book(book) for book in service.get_all()]


@app.get(
    "/api/books/{book_id}",
    response_model=BookResponse,
    responses={404: {"model": MessageResponse}},
    tags=["Books"]
)
def get_book_by_id(
    book_id: BookId,
    service: BookLookupService = Depends(get_lookup_service)
):
    """Get a single book by ID."""
    book = service.get_by_id(book_id)
    if book is None:
        return _message(status.HTTP_404_NOT_FOUND, BOOK_NOT_FOUND_MESSAGE.format(book_id=book_id))
    return BookResponse.from_book(book)


# Search endpoints
@app.get(
    "/api/books/search/author/{author_name}",
    response_model=List[BookResponse],
    responses={404: {"model": MessageResponse}},
    tags=["Search"]
)
def search_books_by_author(
    author_name: str,
    service: BookLookupService = Depends(get_lookup_service)
):
    """Find books whose author matches exactly."""
    return _search_result(service.get_by_author(author_name), SearchField.AUTHOR, author_name)


@app.get(
    "/api/books/search/year/{published_year}",
    response_model=List[BookResponse],
    responses={404: {"model": MessageResponse}},
    tags=["Search"]
)
def search_books_by_year(
    published_year: PublishedYear,
    service: BookLookupService = Depends(get_lookup_service)
):
    """Find books published in the given year."""
    return _search_result(service.get_by_published_year(published_year), SearchField.YEAR, published_year)


@app.get(
    "/api/books/search/genre/{genre_name}",
    response_model=List[BookResponse],
    responses={404: {"model": MessageResponse}},
    tags=["Search"]
)
def search_books_by_genre(
    genre_name: str,
    service: BookLookupService = Depends(get_lookup_service)
):
    """Find books in the given genre."""
    return _search_result(service.get_by_genre(genre_name), SearchField.GENRE, genre_name)


@app.get(
    "/api/books/search/title/{book_title}",
    response_model=List[BookResponse],
    responses={404: {"model": MessageResponse}},
    tags=["Search"]
)
def search_books_by_title(
    book_title: str,
    service: BookLookupService = Depends(get_lookup_service)
):
    """Find books whose title contains the given text, ignoring case."""
    return _search_result(service.get_by_title(book_title), SearchField.TITLE, book_title)


@app.put(
    "/api/books/{book_id}",
    response_model=BookResponse,
    responses={404: {"description": "Book not found; empty body"}},
    tags=["Books"]
)
def update_book(
    book_id: BookId,
    book_in: BookRequest,
    service: BookMutationService = Depends(get_mutation_service)
):
    """
    Replace a book's details.

    Every field is overwritten; fields left out of the body are cleared.
    """
    book = service.update_by_id(book_id, book_in.to_book())
    if book is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return BookResponse.from_book(book)


@app.delete(
    "/api/books/{book_id}",
    response_model=MessageResponse,
    responses={404: {"model": MessageResponse}},
    tags=["Books"]
)
def delete_book(
    book_id: BookId,
    service: BookMutationService = Depends(get_mutation_service)
):
    """Delete a book by ID."""
    if service.delete_by_id(book_id):
        return _message(status.HTTP_200_OK, BOOK_DELETED_MESSAGE.format(book_id=book_id))
    return _message(status.HTTP_404_NOT_FOUND, BOOK_NOT_DELETED_MESSAGE.format(book_id=book_id))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level=api_config.log_level.lower()
    )
