"""Entity: Book."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.lending.entities._base import Entity


class BookStatus(str, Enum):
    """Lending state of a book."""

    AVAILABLE = "available"
    TAKEN = "taken"


class BookDraft(BaseModel):
    """Descriptive fields supplied when a book is created."""

    title: str = Field(description="Title")
    author: str = Field(description="Author")
    published: int = Field(description="Year of publication")
    pages: int = Field(description="Number of pages")


class BookUpdate(BaseModel):
    """Descriptive fields an administrator may change; unset fields are kept."""

    title: str | None = None
    author: str | None = None
    published: int | None = None
    pages: int | None = None


class Book(Entity):
    """Book entity representing a lendable book.

    `status` and `taken_by` only change through the take and return
    transitions; `taken_by` is set exactly when the book is taken.
    """

    title: str = Field(description="Title")
    author: str = Field(description="Author")
    published: int = Field(description="Year of publication")
    pages: int = Field(description="Number of pages")
    status: BookStatus = Field(default=BookStatus.AVAILABLE, description="Lending status")
    taken_by: str | None = Field(default=None, description="Email of the current borrower")

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.published == other.published
            and self.pages == other.pages
            and self.status == other.status
            and self.taken_by == other.taken_by
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.title,
            self.author,
            self.published,
            self.pages,
            self.status,
            self.taken_by,
        ))
