"""Entities module with entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .book import Book, BookDraft, BookRepository, BookStatus, BookTable, BookUpdate

__all__ = [
    "Book",
    "BookDraft",
    "BookRepository",
    "BookStatus",
    "BookTable",
    "BookUpdate",
]
