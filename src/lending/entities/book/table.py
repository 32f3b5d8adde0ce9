"""Book database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.lending.entities._base import EntityTable
from src.lending.entities.book.entity import BookStatus


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    This represents how the Book entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "books"
    __table_args__ = (
        sa.CheckConstraint(
            "(status = 'taken' AND taken_by IS NOT NULL) "
            "OR (status = 'available' AND taken_by IS NULL)",
            name="ck_books_status_taken_by",
        ),
    )

    title: str
    author: str
    published: int
    pages: int
    status: str = Field(default=BookStatus.AVAILABLE.value, max_length=16, index=True)
    taken_by: str | None = Field(default=None)
