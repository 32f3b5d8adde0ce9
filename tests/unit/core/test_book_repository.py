"""Tests for the book repository against a real SQLite database."""

import pytest
from sqlmodel import Session

from src.lending.core.errors import Conflict, NotFound
from src.lending.entities.book import Book, BookDraft, BookRepository, BookStatus


def _add(repo: BookRepository, session: Session, title: str, author: str) -> Book:
    book = repo.create(BookDraft(title=title, author=author, published=1950, pages=200))
    session.commit()
    return book


class TestBookRepositoryReads:
    """Create, get and list."""

    def test_create_assigns_id_and_forces_available(
        self, book_repo: BookRepository, session: Session, draft: BookDraft
    ):
        book = book_repo.create(draft)
        session.commit()

        assert book.id
        assert book.status is BookStatus.AVAILABLE
        assert book.taken_by is None
        assert book.created_at == book.updated_at

    def test_get_by_id_returns_domain_entity(
        self, book_repo: BookRepository, session: Session, draft: BookDraft
    ):
        created = book_repo.create(draft)
        session.commit()

        loaded = book_repo.get_by_id(created.id)

        assert isinstance(loaded, Book)
        assert loaded == created

    def test_get_by_id_not_found(self, book_repo: BookRepository):
        with pytest.raises(NotFound, match="book not found"):
            book_repo.get_by_id("missing")

    def test_list_without_filters_returns_everything_in_creation_order(
        self, book_repo: BookRepository, session: Session
    ):
        first = _add(book_repo, session, "A", "Author One")
        second = _add(book_repo, session, "B", "Author Two")

        assert [b.id for b in book_repo.list({})] == [first.id, second.id]

    def test_list_filters_by_status(self, book_repo: BookRepository, session: Session):
        taken = _add(book_repo, session, "A", "Author One")
        _add(book_repo, session, "B", "Author Two")
        book_repo.take_book(taken.id, "reader@example.com")
        session.commit()

        result = book_repo.list({"status": "taken"})

        assert [b.id for b in result] == [taken.id]
        assert all(b.status is BookStatus.TAKEN for b in result)

    def test_list_filters_by_author_case_insensitive_substring(
        self, book_repo: BookRepository, session: Session
    ):
        hobbit = _add(book_repo, session, "The Hobbit", "J.R.R. Tolkien")
        _add(book_repo, session, "Emma", "Jane Austen")

        result = book_repo.list({"author": "tolkien"})

        assert [b.id for b in result] == [hobbit.id]

    def test_list_author_filter_treats_wildcards_literally(
        self, book_repo: BookRepository, session: Session
    ):
        _add(book_repo, session, "Emma", "Jane Austen")

        assert book_repo.list({"author": "%"}) == []
        assert book_repo.list({"author": "J_ne"}) == []

    def test_list_combines_filters(self, book_repo: BookRepository, session: Session):
        hobbit = _add(book_repo, session, "The Hobbit", "J.R.R. Tolkien")
        _add(book_repo, session, "Silmarillion", "J.R.R. Tolkien")
        book_repo.take_book(hobbit.id, "reader@example.com")
        session.commit()

        result = book_repo.list({"status": "taken", "author": "TOLKIEN"})

        assert [b.id for b in result] == [hobbit.id]


class TestBookRepositoryWrites:
    """Update and the conditional delete/take/return statements."""

    def test_update_overwrites_descriptive_fields(
        self, book_repo: BookRepository, session: Session, draft: BookDraft
    ):
        created = book_repo.create(draft)
        session.commit()
        before = book_repo.get_by_id(created.id)

        changed = created.model_copy(update={"title": "There and Back Again", "pages": 320})
        book_repo.update(changed)
        session.commit()

        loaded = book_repo.get_by_id(created.id)
        assert loaded.title == "There and Back Again"
        assert loaded.pages == 320
        assert loaded.updated_at > before.updated_at
        assert loaded.created_at == before.created_at

    def test_update_does_not_touch_lending_state(
        self, book_repo: BookRepository, session: Session, draft: BookDraft
    ):
        created = book_repo.create(draft)
        book_repo.take_book(created.id, "reader@example.com")
        session.commit()

        # created still says "available"; only descriptive fields are written
        book_repo.update(created.model_copy(update={"pages": 999}))
        session.commit()

        loaded = book_repo.get_by_id(created.id)
        assert loaded.status is BookStatus.TAKEN
        assert loaded.taken_by == "reader@example.com"
        assert loaded.pages == 999

    def test_update_missing_book(self, book_repo: BookRepository):
        ghost = Book(title="Ghost", author="Nobody", published=2000, pages=1)

        with pytest.raises(NotFound):
            book_repo.update(ghost)

    def test_take_and_return(self, book_repo: BookRepository, session: Session, draft: BookDraft):
        created = book_repo.create(draft)
        session.commit()
        before = book_repo.get_by_id(created.id)

        book_repo.take_book(created.id, "reader@example.com")
        session.commit()
        taken = book_repo.get_by_id(created.id)
        assert taken.status is BookStatus.TAKEN
        assert taken.taken_by == "reader@example.com"
        assert taken.updated_at > before.updated_at

        book_repo.return_book(created.id)
        session.commit()
        returned = book_repo.get_by_id(created.id)
        assert returned.status is BookStatus.AVAILABLE
        assert returned.taken_by is None
        assert returned.updated_at > taken.updated_at
        assert returned.created_at == before.created_at

    def test_take_already_taken_conflicts(
        self, book_repo: BookRepository, session: Session, draft: BookDraft
    ):
        created = book_repo.create(draft)
        book_repo.take_book(created.id, "first@example.com")
        session.commit()
        before = book_repo.get_by_id(created.id)

        with pytest.raises(Conflict, match="book not found or not available"):
            book_repo.take_book(created.id, "second@example.com")

        after = book_repo.get_by_id(created.id)
        assert after.taken_by == "first@example.com"
        assert after.updated_at == before.updated_at

    def test_take_missing_book_conflicts(self, book_repo: BookRepository):
        with pytest.raises(Conflict, match="book not found or not available"):
            book_repo.take_book("missing", "reader@example.com")

    def test_return_available_book_conflicts(
        self, book_repo: BookRepository, session: Session, draft: BookDraft
    ):
        created = book_repo.create(draft)
        session.commit()

        with pytest.raises(Conflict, match="book not found or not taken"):
            book_repo.return_book(created.id)

    def test_return_missing_book_conflicts(self, book_repo: BookRepository):
        with pytest.raises(Conflict, match="book not found or not taken"):
            book_repo.return_book("missing")

    def test_delete_available_book(
        self, book_repo: BookRepository, session: Session, draft: BookDraft
    ):
        created = book_repo.create(draft)
        session.commit()

        book_repo.delete(created.id)
        session.commit()

        with pytest.raises(NotFound):
            book_repo.get_by_id(created.id)

    def test_delete_taken_book_conflicts(
        self, book_repo: BookRepository, session: Session, draft: BookDraft
    ):
        created = book_repo.create(draft)
        book_repo.take_book(created.id, "reader@example.com")
        session.commit()

        with pytest.raises(Conflict, match="book not found or not available"):
            book_repo.delete(created.id)

        assert book_repo.get_by_id(created.id).status is BookStatus.TAKEN

    def test_delete_missing_book_conflicts(self, book_repo: BookRepository):
        with pytest.raises(Conflict, match="book not found or not available"):
            book_repo.delete("missing")
