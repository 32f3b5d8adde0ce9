"""Book API router: public lending routes and admin catalogue routes."""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from src.lending.api.http.deps import get_lending_service, require_admin
from src.lending.core.services import LendingService
from src.lending.entities.book import Book, BookDraft, BookStatus, BookUpdate

router = APIRouter(prefix="/books", tags=["books"])


class TakeBookRequest(BaseModel):
    email: str


@router.get("", response_model=list[Book])
def list_books(
    status: BookStatus | None = None,
    author: str | None = None,
    service: LendingService = Depends(get_lending_service),
) -> list[Book]:
    """List books, optionally filtered by status and author substring."""
    filters: dict[str, str] = {}
    if status is not None:
        filters["status"] = status.value
    if author:
        filters["author"] = author
    return service.list(filters)


@router.get("/{book_id}", response_model=Book)
def get_book(
    book_id: str,
    service: LendingService = Depends(get_lending_service),
) -> Book:
    """Get a book by ID."""
    return service.get_by_id(book_id)


@router.post("/{book_id}/take")
def take_book(
    book_id: str,
    request: TakeBookRequest,
    service: LendingService = Depends(get_lending_service),
) -> dict[str, str]:
    """Lend an available book to the given email address."""
    service.take_book(book_id, request.email)
    return {"message": "Book taken successfully"}


@router.post("/{book_id}/return")
def return_book(
    book_id: str,
    service: LendingService = Depends(get_lending_service),
) -> dict[str, str]:
    """Give a taken book back."""
    service.return_book(book_id)
    return {"message": "Book returned successfully"}


@router.post(
    "", response_model=Book, status_code=201, dependencies=[Depends(require_admin)]
)
def create_book(
    draft: BookDraft,
    service: LendingService = Depends(get_lending_service),
) -> Book:
    """Create a new book."""
    return service.create(draft)


@router.put("/{book_id}", response_model=Book, dependencies=[Depends(require_admin)])
def update_book(
    book_id: str,
    fields: BookUpdate,
    service: LendingService = Depends(get_lending_service),
) -> Book:
    """Update the descriptive fields of a book."""
    return service.update(book_id, fields)


@router.delete("/{book_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_book(
    book_id: str,
    service: LendingService = Depends(get_lending_service),
) -> Response:
    """Delete an available book."""
    service.delete(book_id)
    return Response(status_code=204)
