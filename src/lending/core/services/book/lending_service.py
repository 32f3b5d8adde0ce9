import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import date

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.lending.core.errors import LendingError, StorageFailure, ValidationError
from src.lending.entities.book import Book, BookDraft, BookRepository, BookUpdate

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def validate_book_fields(book: BookDraft | Book) -> None:
    """Raise ValidationError for the first descriptive field that breaks a rule."""
    if not book.title.strip():
        raise ValidationError("title required")
    if not book.author.strip():
        raise ValidationError("author required")
    if book.published <= 0:
        raise ValidationError("published year must be positive")
    if book.published > date.today().year:
        raise ValidationError("published year cannot be in the future")
    if book.pages <= 0:
        raise ValidationError("pages must be positive")


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


class LendingService:
    """Business rules for the book catalogue and the take/return lifecycle.

    Every call runs as one unit of work on the given session: committed on
    success, rolled back on any failure. Storage-level NotFound and Conflict
    propagate unchanged; raw database errors become StorageFailure.
    """

    def __init__(self, db_session: Session):
        self._db_session = db_session
        self._book_repo = BookRepository(db_session)

    @contextmanager
    def _unit_of_work(self, operation: str) -> Iterator[BookRepository]:
        try:
            yield self._book_repo
            self._db_session.commit()
        except LendingError:
            self._db_session.rollback()
            raise
        except SQLAlchemyError as e:
            self._db_session.rollback()
            logger.bind(error_type=type(e).__name__).error(
                "Storage failure during {}: {}", operation, e
            )
            raise StorageFailure(f"{operation} failed") from e

    def create(self, draft: BookDraft) -> Book:
        validate_book_fields(draft)
        with self._unit_of_work("create") as repo:
            book = repo.create(draft)
        logger.info("Book {} created", book.id)
        return book

    def get_by_id(self, book_id: str) -> Book:
        with self._unit_of_work("get_by_id") as repo:
            return repo.get_by_id(book_id)

    def list(self, filters: Mapping[str, str] | None = None) -> list[Book]:
        """List books matching an exact `status` and/or an `author` substring."""
        with self._unit_of_work("list") as repo:
            return repo.list(filters or {})

    def update(self, book_id: str, fields: BookUpdate) -> Book:
        """Apply descriptive field changes; status and taken_by are never touched."""
        with self._unit_of_work("update") as repo:
            existing = repo.get_by_id(book_id)
            merged = existing.model_copy(
                update=fields.model_dump(exclude_unset=True, exclude_none=True)
            )
            validate_book_fields(merged)
            book = repo.update(merged)
        logger.info("Book {} updated", book_id)
        return book

    def delete(self, book_id: str) -> None:
        with self._unit_of_work("delete") as repo:
            repo.delete(book_id)
        logger.info("Book {} deleted", book_id)

    def take_book(self, book_id: str, email: str) -> None:
        if not is_valid_email(email):
            raise ValidationError("invalid email format")
        with self._unit_of_work("take_book") as repo:
            repo.take_book(book_id, email)
        logger.info("Book {} taken", book_id)

    def return_book(self, book_id: str) -> None:
        with self._unit_of_work("return_book") as repo:
            repo.return_book(book_id)
        logger.info("Book {} returned", book_id)
