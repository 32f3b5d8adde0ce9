"""Book repository: the only component that writes to the books table."""

from collections.abc import Mapping

from loguru import logger
from sqlalchemy import delete, update
from sqlmodel import Session, col, select

from src.lending.core.errors import Conflict, NotFound
from src.lending.entities._base import utc_now
from src.lending.entities.book.entity import Book, BookDraft, BookStatus
from src.lending.entities.book.table import BookTable


class BookRepository:
    """Data-access layer for books.

    `delete`, `take_book` and `return_book` are single conditional
    statements; success means exactly one row matched both the id and the
    expected status. Transaction boundaries belong to the caller.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, draft: BookDraft) -> Book:
        now = utc_now()
        row = BookTable(
            title=draft.title,
            author=draft.author,
            published=draft.published,
            pages=draft.pages,
            status=BookStatus.AVAILABLE.value,
            taken_by=None,
            created_at=now,
            updated_at=now,
        )
        self._session.add(row)
        self._session.flush()
        logger.debug("Inserted book {}", row.id)
        return Book.model_validate(row, from_attributes=True)

    def get_by_id(self, book_id: str) -> Book:
        row = self._session.get(BookTable, book_id, populate_existing=True)
        if row is None:
            raise NotFound("book not found")
        return Book.model_validate(row, from_attributes=True)

    def list(self, filters: Mapping[str, str]) -> list[Book]:
        conditions = []
        if "status" in filters:
            conditions.append(col(BookTable.status) == filters["status"])
        if "author" in filters:
            conditions.append(
                col(BookTable.author).icontains(filters["author"], autoescape=True)
            )

        statement = select(BookTable).order_by(
            col(BookTable.created_at), col(BookTable.id)
        )
        if conditions:
            statement = statement.where(*conditions)
        # rows changed by conditional updates are stale in the identity map
        statement = statement.execution_options(populate_existing=True)
        rows = self._session.exec(statement).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def update(self, book: Book) -> Book:
        """Overwrite the descriptive fields of `book` by id."""
        now = utc_now()
        statement = (
            update(BookTable)
            .where(col(BookTable.id) == book.id)
            .values(
                title=book.title,
                author=book.author,
                published=book.published,
                pages=book.pages,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount != 1:
            raise NotFound("book not found")
        return book.model_copy(update={"updated_at": now})

    def delete(self, book_id: str) -> None:
        statement = (
            delete(BookTable)
            .where(
                col(BookTable.id) == book_id,
                col(BookTable.status) == BookStatus.AVAILABLE.value,
            )
            .execution_options(synchronize_session=False)
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount != 1:
            raise Conflict("book not found or not available")

    def take_book(self, book_id: str, email: str) -> None:
        statement = (
            update(BookTable)
            .where(
                col(BookTable.id) == book_id,
                col(BookTable.status) == BookStatus.AVAILABLE.value,
            )
            .values(status=BookStatus.TAKEN.value, taken_by=email, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount != 1:
            raise Conflict("book not found or not available")

    def return_book(self, book_id: str) -> None:
        statement = (
            update(BookTable)
            .where(
                col(BookTable.id) == book_id,
                col(BookTable.status) == BookStatus.TAKEN.value,
            )
            .values(status=BookStatus.AVAILABLE.value, taken_by=None, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount != 1:
            raise Conflict("book not found or not taken")
