"""
FastAPI RESTful API for the Book Management service.

This module provides a REST API for:
- Adding, updating and deleting book records
- Retrieving books by ID or as a full listing
- Searching by author, genre, published year or title
"""
