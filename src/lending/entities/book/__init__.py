"""Book entity module.

- Book, BookDraft, BookUpdate, BookStatus: domain models
- BookTable: database persistence model
- BookRepository: data access layer
"""

from .entity import Book, BookDraft, BookStatus, BookUpdate
from .repository import BookRepository
from .table import BookTable

__all__ = [
    "Book",
    "BookDraft",
    "BookRepository",
    "BookStatus",
    "BookTable",
    "BookUpdate",
]
